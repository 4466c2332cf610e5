from relaykit.tasks.base import ProjectTask, TaskOutcome

PLACEHOLDER_SCHEMA = """\
# Replace this file with the GraphQL schema of your server.

type Query {
  field: String
}
"""


class GenerateGraphQlSchemaFileTask(ProjectTask):
    """Write a placeholder schema so relay-compiler can run right away."""

    label = "Generate GraphQL schema file"

    def run(self) -> TaskOutcome:
        schema_file = self.context.schema_file
        self.update_label(f"{self.label} {schema_file.rel}")

        if self.fs.exists(schema_file.abs):
            return TaskOutcome.skipped("File exists")

        self.fs.create_directory(schema_file.parent_directory)
        self.fs.write(schema_file.abs, PLACEHOLDER_SCHEMA)
        return TaskOutcome.succeeded()
