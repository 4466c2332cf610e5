from relaykit.config import (
    REACT_RELAY_PACKAGE,
    RELAY_ENV,
    RELAY_ENV_ATTRIBUTE,
    RELAY_ENV_INIT,
    RELAY_ENV_PROVIDER,
    RENDER_METHOD,
)
from relaykit.filesystem import relative_import_path
from relaykit.schemas import Toolchain
from relaykit.syntax.adapter import SyntaxTree
from relaykit.syntax.codegen import CallExpression, Identifier, JsValue
from relaykit.syntax.matchers import JsxHostMode, find_jsx_host
from relaykit.syntax.mutators import MutationResult, ensure_import, wrap_jsx
from relaykit.tasks.base import ProjectTask, TaskOutcome


def add_environment_provider(
    tree: SyntaxTree,
    mode: JsxHostMode,
    environment_module: str,
    environment_export: str = RELAY_ENV,
    call_environment: bool = False,
) -> MutationResult:
    """
    Wrap the application's root JSX in RelayEnvironmentProvider.

    Both imports are ensured before the wrap so the element only
    references names that are bound in the file.
    """
    environment = ensure_import(tree, environment_module, environment_export)
    provider = ensure_import(environment.tree, REACT_RELAY_PACKAGE, RELAY_ENV_PROVIDER)
    tree = provider.tree

    anchor = find_jsx_host(tree, mode, RENDER_METHOD)

    expression: JsValue = Identifier(environment.local_name)
    if call_environment:
        expression = CallExpression(environment.local_name)

    result = wrap_jsx(tree, anchor, provider.local_name, RELAY_ENV_ATTRIBUTE, expression)
    if not result.applied and (environment.inserted or provider.inserted):
        return MutationResult.changed(result.tree)
    return result


class AddRelayEnvironmentProviderTask(ProjectTask):
    """Provide the Relay environment to the component tree."""

    label = "Add RelayEnvironmentProvider"

    def run(self) -> TaskOutcome:
        main_file = self.context.main_file
        self.update_label(f"{self.label} to {main_file.rel}")

        path = self.locate(main_file)
        tree = self.read_tree(path)

        environment_module = relative_import_path(path, self.context.relay_env_file.abs)

        if self.context.uses(Toolchain.NEXT):
            result = add_environment_provider(
                tree, JsxHostMode.FIRST_RETURN, environment_module,
                environment_export=RELAY_ENV_INIT, call_environment=True,
            )
        else:
            result = add_environment_provider(tree, JsxHostMode.RENDER_CALL, environment_module)

        if not result.applied:
            return TaskOutcome.skipped(result.reason)

        self.write_tree(path, result.tree)
        return TaskOutcome.succeeded()
