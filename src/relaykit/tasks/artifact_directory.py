from relaykit.tasks.base import ProjectTask, TaskOutcome


class GenerateArtifactDirectoryTask(ProjectTask):
    label = "Generate artifact directory"

    def is_enabled(self) -> bool:
        return self.context.artifact_path is not None

    def run(self) -> TaskOutcome:
        artifact_path = self.context.artifact_path
        self.update_label(f"{self.label} {artifact_path.rel}")

        if self.fs.exists(artifact_path.abs):
            return TaskOutcome.skipped("Directory exists")

        self.fs.create_directory(artifact_path.abs)
        return TaskOutcome.succeeded()
