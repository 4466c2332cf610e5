"""
Tests for the Mutators: property/array upserts, imports and JSX wrapping.

Every mutation is checked against the exact expected text, so any
reformatting of untouched regions shows up as a failure.
"""

import pytest

from relaykit.syntax.adapter import parse, print_tree
from relaykit.syntax.codegen import (
    CallExpression,
    CodeStyle,
    Identifier,
    ObjectLiteral,
    StringLiteral,
)
from relaykit.syntax.matchers import (
    JsxHostMode,
    find_call_argument_property,
    find_exported_object,
    find_jsx_host,
)
from relaykit.syntax.mutators import (
    ensure_import,
    upsert_array_element,
    upsert_property,
    wrap_jsx,
)


def _plugins(tree):
    return find_call_argument_property(tree, "defineConfig", "plugins").value


class TestArrayElementUpsert:

    def test_empty_array(self):
        tree = parse("export default { plugins: [] }")
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert result.applied
        assert print_tree(result.tree) == "export default { plugins: [relay] }"

    def test_single_line_array(self):
        tree = parse("export default defineConfig({ plugins: [react()] });\n")
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert print_tree(result.tree) == "export default defineConfig({ plugins: [react(), relay] });\n"

    def test_multi_line_array_with_trailing_comma(self):
        code = (
            "export default defineConfig({\n"
            "  plugins: [\n"
            "    react(),\n"
            "  ],\n"
            "});\n"
        )
        tree = parse(code)
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert print_tree(result.tree) == (
            "export default defineConfig({\n"
            "  plugins: [\n"
            "    react(),\n"
            "    relay,\n"
            "  ],\n"
            "});\n"
        )

    def test_multi_line_array_without_trailing_comma(self):
        code = (
            "export default defineConfig({\n"
            "  plugins: [\n"
            "    react() // main\n"
            "  ]\n"
            "})\n"
        )
        tree = parse(code)
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert print_tree(result.tree) == (
            "export default defineConfig({\n"
            "  plugins: [\n"
            "    react(), // main\n"
            "    relay\n"
            "  ]\n"
            "})\n"
        )

    def test_untouched_regions_are_preserved(self):
        code = (
            "// leading comment\n"
            "export default defineConfig({\n"
            "  // plugins go here\n"
            "  plugins: [react()],   // trailing comment\n"
            "  server: {port:3000},\n"
            "});\n"
        )
        tree = parse(code)
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert print_tree(result.tree) == code.replace("[react()]", "[react(), relay]")

    def test_second_run_is_skipped(self):
        tree = parse("export default defineConfig({ plugins: [react()] });\n")
        first = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        second = upsert_array_element(first.tree, _plugins(first.tree), Identifier("relay"))

        assert not second.applied
        assert second.tree is first.tree
        assert "relay" in second.reason

    def test_call_of_element_counts_as_present(self):
        tree = parse("export default defineConfig({ plugins: [relay()] });\n")
        result = upsert_array_element(tree, _plugins(tree), Identifier("relay"))
        assert not result.applied
        assert print_tree(result.tree) == "export default defineConfig({ plugins: [relay()] });\n"


class TestPropertyUpsert:

    RELAY = ObjectLiteral((
        ("relay", ObjectLiteral((
            ("src", StringLiteral("./src")),
            ("language", StringLiteral("javascript")),
        ))),
    ))

    def test_appends_after_last_member(self):
        code = "const nextConfig = {\n  reactStrictMode: true,\n};\n\nmodule.exports = nextConfig;\n"
        tree = parse(code)
        result = upsert_property(tree, find_exported_object(tree), "compiler", self.RELAY)
        assert print_tree(result.tree) == (
            "const nextConfig = {\n"
            "  reactStrictMode: true,\n"
            '  compiler: { relay: { src: "./src", language: "javascript" } },\n'
            "};\n"
            "\n"
            "module.exports = nextConfig;\n"
        )

    def test_existing_property_is_skipped(self):
        tree = parse("module.exports = { compiler: { styledComponents: true } };\n")
        result = upsert_property(tree, find_exported_object(tree), "compiler", self.RELAY)

        assert not result.applied
        assert result.reason == 'Property "compiler" already present'
        assert result.tree is tree

    def test_value_is_not_compared(self):
        tree = parse("module.exports = { reactStrictMode: false };\n")
        result = upsert_property(tree, find_exported_object(tree), "reactStrictMode", Identifier("true"))
        assert not result.applied
        assert "false" in print_tree(result.tree)

    def test_empty_object(self):
        tree = parse("module.exports = {};\n")
        result = upsert_property(tree, find_exported_object(tree), "reactStrictMode", Identifier("true"))
        assert print_tree(result.tree) == "module.exports = { reactStrictMode: true };\n"

    def test_empty_object_with_split_value(self):
        tree = parse("module.exports = {};\n")
        value = ObjectLiteral((
            ("relay", ObjectLiteral((
                ("src", StringLiteral("./src")),
                ("language", StringLiteral("typescript")),
            ))),
        ))
        style = CodeStyle(max_line_width=40)
        result = upsert_property(tree, find_exported_object(tree), "compiler", value, style)
        assert print_tree(result.tree) == (
            "module.exports = {\n"
            "  compiler: {\n"
            "    relay: {\n"
            '      src: "./src",\n'
            '      language: "typescript"\n'
            "    }\n"
            "  }\n"
            "};\n"
        )

    def test_single_line_object(self):
        tree = parse("module.exports = { a: 1 };\n")
        result = upsert_property(tree, find_exported_object(tree), "b", StringLiteral("x"))
        assert print_tree(result.tree) == 'module.exports = { a: 1, b: "x" };\n'

    def test_follows_indent_and_quotes(self):
        code = (
            "const path = require('path');\n"
            "\n"
            "module.exports = {\n"
            "    reactStrictMode: true,\n"
            "    images: { domains: ['example.com'] },\n"
            "};\n"
        )
        tree = parse(code)
        value = ObjectLiteral((("relay", ObjectLiteral((("src", StringLiteral("./src")),))),))
        result = upsert_property(tree, find_exported_object(tree), "compiler", value)
        assert print_tree(result.tree) == (
            "const path = require('path');\n"
            "\n"
            "module.exports = {\n"
            "    reactStrictMode: true,\n"
            "    images: { domains: ['example.com'] },\n"
            "    compiler: { relay: { src: './src' } },\n"
            "};\n"
        )

    def test_long_values_are_split(self):
        code = "const config = {\n  reactStrictMode: true,\n};\nmodule.exports = config;\n"
        tree = parse(code)
        value = ObjectLiteral((
            ("src", StringLiteral("./src")),
            ("language", StringLiteral("typescript")),
        ))
        style = CodeStyle(max_line_width=40)
        result = upsert_property(tree, find_exported_object(tree), "relay", value, style)
        assert print_tree(result.tree) == (
            "const config = {\n"
            "  reactStrictMode: true,\n"
            "  relay: {\n"
            '    src: "./src",\n'
            '    language: "typescript"\n'
            "  },\n"
            "};\n"
            "module.exports = config;\n"
        )

    def test_crlf_line_endings_are_kept(self):
        code = "module.exports = {\r\n  reactStrictMode: true,\r\n};\r\n"
        tree = parse(code)
        result = upsert_property(tree, find_exported_object(tree), "swcMinify", Identifier("true"))
        assert print_tree(result.tree) == (
            "module.exports = {\r\n  reactStrictMode: true,\r\n  swcMinify: true,\r\n};\r\n"
        )


class TestImportEnsure:

    def test_inserts_at_top(self):
        tree = parse('import React from "react";\n\nfoo();\n')
        result = ensure_import(tree, "react-relay", "RelayEnvironmentProvider")

        assert result.inserted
        assert result.local_name == "RelayEnvironmentProvider"
        assert print_tree(result.tree) == (
            'import { RelayEnvironmentProvider } from "react-relay";\n'
            'import React from "react";\n'
            "\n"
            "foo();\n"
        )

    def test_reuses_existing_alias(self):
        tree = parse('import { RelayEnvironmentProvider as REP } from "react-relay";\n')
        result = ensure_import(tree, "react-relay", "RelayEnvironmentProvider")

        assert not result.inserted
        assert result.local_name == "REP"
        assert result.tree is tree

    def test_aliases_on_name_conflict(self):
        tree = parse("const RelayEnvironment = null;\n")
        result = ensure_import(tree, "./RelayEnvironment", "RelayEnvironment")

        assert result.local_name == "_RelayEnvironment"
        assert print_tree(result.tree).startswith(
            'import { RelayEnvironment as _RelayEnvironment } from "./RelayEnvironment";\n'
        )

    def test_alias_counter(self):
        tree = parse("const relay = 1;\nconst _relay = 2;\n")
        result = ensure_import(tree, "vite-plugin-relay", "relay", is_default=True)
        assert result.local_name == "_relay2"
        assert print_tree(result.tree).startswith('import _relay2 from "vite-plugin-relay";\n')

    def test_default_import_without_semicolons(self):
        code = 'import react from "@vitejs/plugin-react"\n\nexport default defineConfig({\n  plugins: [react()]\n})\n'
        tree = parse(code)
        result = ensure_import(tree, "vite-plugin-relay", "relay", is_default=True)
        assert print_tree(result.tree) == 'import relay from "vite-plugin-relay"\n' + code

    def test_after_directive(self):
        tree = parse('"use client";\nimport React from "react";\n')
        result = ensure_import(tree, "react-relay", "RelayEnvironmentProvider")
        assert print_tree(result.tree) == (
            '"use client";\n'
            'import { RelayEnvironmentProvider } from "react-relay";\n'
            'import React from "react";\n'
        )

    def test_after_shebang(self):
        tree = parse("#!/usr/bin/env node\nconsole.log(1);\n")
        result = ensure_import(tree, "m", "x")
        assert print_tree(result.tree) == '#!/usr/bin/env node\nimport { x } from "m";\nconsole.log(1);\n'

    def test_after_byte_order_mark(self):
        tree = parse("\ufeffimport App from './App';\n")
        result = ensure_import(tree, "react-relay", "RelayEnvironmentProvider")
        assert print_tree(result.tree) == (
            "\ufeffimport { RelayEnvironmentProvider } from 'react-relay';\n"
            "import App from './App';\n"
        )

    def test_second_call_is_a_no_op(self):
        tree = parse("foo();\n")
        first = ensure_import(tree, "react-relay", "RelayEnvironmentProvider")
        second = ensure_import(first.tree, "react-relay", "RelayEnvironmentProvider")
        assert not second.inserted
        assert print_tree(second.tree) == print_tree(first.tree)


class TestJsxWrap:

    def test_inline_wrap(self):
        code = "function App() {\n  return <App/>;\n}\n"
        tree = parse(code)
        anchor = find_jsx_host(tree, JsxHostMode.FIRST_RETURN)
        result = wrap_jsx(tree, anchor, "RelayEnvironmentProvider", "environment", Identifier("RelayEnvironment"))
        assert print_tree(result.tree) == (
            "function App() {\n"
            "  return <RelayEnvironmentProvider environment={RelayEnvironment}><App/></RelayEnvironmentProvider>;\n"
            "}\n"
        )

    def test_call_expression_attribute(self):
        tree = parse("function A() { return <B />; }\n")
        anchor = find_jsx_host(tree, JsxHostMode.FIRST_RETURN)
        result = wrap_jsx(tree, anchor, "P", "environment", CallExpression("initRelayEnvironment"))
        assert "<P environment={initRelayEnvironment()}><B /></P>" in print_tree(result.tree)

    def test_multi_line_wrap(self):
        code = (
            "root.render(\n"
            "  <React.StrictMode>\n"
            "    <App />\n"
            "  </React.StrictMode>\n"
            ");\n"
        )
        tree = parse(code)
        anchor = find_jsx_host(tree, JsxHostMode.RENDER_CALL)
        result = wrap_jsx(tree, anchor, "RelayEnvironmentProvider", "environment", Identifier("RelayEnvironment"))
        assert print_tree(result.tree) == (
            "root.render(\n"
            "  <RelayEnvironmentProvider environment={RelayEnvironment}>\n"
            "    <React.StrictMode>\n"
            "      <App />\n"
            "    </React.StrictMode>\n"
            "  </RelayEnvironmentProvider>\n"
            ");\n"
        )

    def test_already_wrapped(self):
        code = "function A() {\n  return <RelayEnvironmentProvider environment={env}><App /></RelayEnvironmentProvider>;\n}\n"
        tree = parse(code)
        anchor = find_jsx_host(tree, JsxHostMode.FIRST_RETURN)
        result = wrap_jsx(tree, anchor, "RelayEnvironmentProvider", "environment", Identifier("RelayEnvironment"))

        assert not result.applied
        assert print_tree(result.tree) == code

    def test_rejects_non_jsx(self):
        tree = parse("const a = 1;\n")
        with pytest.raises(TypeError):
            wrap_jsx(tree, tree.root, "P", "environment", Identifier("x"))

    def test_multi_line_template_literal_is_kept(self):
        code = "root.render(\n  <pre>{`line1\nline2`}</pre>\n);\n"
        tree = parse(code, "tsx")
        anchor = find_jsx_host(tree, JsxHostMode.RENDER_CALL)
        result = wrap_jsx(tree, anchor, "RelayEnvironmentProvider", "environment", Identifier("RelayEnvironment"))
        assert print_tree(result.tree) == (
            "root.render(\n"
            "  <RelayEnvironmentProvider environment={RelayEnvironment}>\n"
            "    <pre>{`line1\nline2`}</pre>\n"
            "  </RelayEnvironmentProvider>\n"
            ");\n"
        )

    def test_lines_after_template_literal_are_reindented(self):
        code = "root.render(\n  <div>\n    <pre>{`a\n  b`}</pre>\n  </div>\n);\n"
        tree = parse(code)
        anchor = find_jsx_host(tree, JsxHostMode.RENDER_CALL)
        result = wrap_jsx(tree, anchor, "P", "environment", Identifier("env"))
        assert print_tree(result.tree) == (
            "root.render(\n"
            "  <P environment={env}>\n"
            "    <div>\n"
            "      <pre>{`a\n  b`}</pre>\n"
            "    </div>\n"
            "  </P>\n"
            ");\n"
        )
