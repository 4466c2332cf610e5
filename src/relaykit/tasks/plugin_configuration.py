from relaykit.config import (
    NEXTJS_COMPILER_PROPERTY,
    NEXTJS_EXPORT_NAME,
    NEXTJS_RELAY_PROPERTY,
    VITE_CONFIG_FACTORY,
    VITE_PLUGINS_PROPERTY,
    VITE_RELAY_IMPORT_NAME,
    VITE_RELAY_PACKAGE,
)
from relaykit.exceptions import ConfigError
from relaykit.schemas import Toolchain
from relaykit.syntax.adapter import SyntaxTree
from relaykit.syntax.codegen import ArrayLiteral, Identifier, ObjectLiteral, StringLiteral
from relaykit.syntax.matchers import (
    find_call_argument_property,
    find_exported_object,
    find_property,
)
from relaykit.syntax.mutators import (
    MutationResult,
    ensure_import,
    upsert_array_element,
    upsert_property,
)
from relaykit.syntax.nodes import NodeKind
from relaykit.tasks.base import ProjectTask, TaskOutcome


def add_vite_relay_plugin(tree: SyntaxTree) -> MutationResult:
    """
    Import vite-plugin-relay and list it in `plugins` of
    `export default defineConfig({...})`.
    """
    imported = ensure_import(tree, VITE_RELAY_PACKAGE, VITE_RELAY_IMPORT_NAME, is_default=True)
    tree = imported.tree
    plugin = Identifier(imported.local_name)

    anchor = find_call_argument_property(tree, VITE_CONFIG_FACTORY, VITE_PLUGINS_PROPERTY)
    if anchor.exists:
        result = upsert_array_element(tree, anchor.value, plugin)
    else:
        result = upsert_property(tree, anchor.container, VITE_PLUGINS_PROPERTY, ArrayLiteral((plugin,)))

    if not result.applied and imported.inserted:
        # The plugin was listed under the same name without its import
        return MutationResult.changed(result.tree)
    return result


def add_next_relay_compiler_option(tree: SyntaxTree, relay_options: ObjectLiteral) -> MutationResult:
    """Add `compiler.relay` to the object exported by next.config.js."""
    config = find_exported_object(tree, NEXTJS_EXPORT_NAME)
    compiler = find_property(tree, config, NEXTJS_COMPILER_PROPERTY, NodeKind.OBJECT)

    if not compiler.exists:
        return upsert_property(
            tree, config, NEXTJS_COMPILER_PROPERTY,
            ObjectLiteral(((NEXTJS_RELAY_PROPERTY, relay_options),)),
        )
    return upsert_property(tree, compiler.value, NEXTJS_RELAY_PROPERTY, relay_options)


class AddRelayPluginConfigurationTask(ProjectTask):
    """Register Relay with the bundler or framework configuration."""

    label = "Add Relay plugin configuration"

    def is_enabled(self) -> bool:
        return self.context.uses(Toolchain.VITE, Toolchain.NEXT)

    def run(self) -> TaskOutcome:
        if self.context.config_file is None:
            raise ConfigError(f"No configuration file known for toolchain '{self.context.toolchain.value}'")

        self.update_label(f"{self.label} to {self.context.config_file.rel}")

        path = self.locate(self.context.config_file)
        tree = self.read_tree(path)

        if self.context.uses(Toolchain.VITE):
            result = add_vite_relay_plugin(tree)
        elif self.context.uses(Toolchain.NEXT):
            result = add_next_relay_compiler_option(tree, self.relay_compiler_options())
        else:
            raise ConfigError(f"Unsupported toolchain: {self.context.toolchain.value}")

        if not result.applied:
            return TaskOutcome.skipped(result.reason)

        self.write_tree(path, result.tree)
        return TaskOutcome.succeeded()

    def relay_compiler_options(self) -> ObjectLiteral:
        properties = [
            ("src", StringLiteral(self.context.src_path.prettified)),
            ("language", StringLiteral(self.context.relay_compiler_language)),
        ]
        if self.context.artifact_path is not None:
            properties.append(
                ("artifactDirectory", StringLiteral(self.context.artifact_path.prettified))
            )
        return ObjectLiteral(tuple(properties))
