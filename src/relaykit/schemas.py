from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from relaykit.config import (
    MAIN_FILE_EXT,
    MAIN_FILE_NO_EXT,
    NEXTJS_CONFIG_FILE,
    RELAY_ENV_FILE_NO_EXT,
    SCHEMA_FILE_NAME,
    VITE_CONFIG_FILE_NO_EXT,
)
from relaykit.exceptions import ConfigError


class Toolchain(str, Enum):
    """Supported project scaffolds."""
    VITE = "vite"
    CRA = "cra"
    NEXT = "next"


class ResolvedPath(BaseModel):
    """
    A file or directory location inside the target project.
    Carries both the absolute path and its project-root-relative POSIX form.
    """
    model_config = ConfigDict(frozen=True)

    abs: Path
    rel: str

    @classmethod
    def from_root(cls, project_root: Path, location: Union[str, Path]) -> "ResolvedPath":
        """Resolve a relative or absolute location against the project root."""
        root = Path(project_root).resolve()
        candidate = Path(location)
        if not candidate.is_absolute():
            candidate = root / candidate
        candidate = candidate.resolve()

        try:
            rel = candidate.relative_to(root).as_posix()
        except ValueError:
            raise ConfigError(f"{location} must be located below {root}")

        return cls(abs=candidate, rel=rel or ".")

    @property
    def parent_directory(self) -> Path:
        return self.abs.parent

    @property
    def name(self) -> str:
        return self.abs.name

    @property
    def prettified(self) -> str:
        """Relative form with a leading './', as relay-compiler expects it."""
        if self.rel == ".":
            return "./"
        return "./" + str(PurePosixPath(self.rel))


class ProjectContext(BaseModel):
    """
    Immutable snapshot of the resolved target project.

    Created once after argument resolution and passed by reference to
    every task of a run.
    """
    model_config = ConfigDict(frozen=True)

    project_root: Path
    toolchain: Toolchain
    typescript: bool = False
    subscriptions: bool = False
    main_file: ResolvedPath
    config_file: Optional[ResolvedPath] = None
    relay_env_file: ResolvedPath
    schema_file: ResolvedPath
    src_path: ResolvedPath
    artifact_path: Optional[ResolvedPath] = None

    def uses(self, *toolchains: Toolchain) -> bool:
        """True if the project uses one of the given toolchains."""
        return self.toolchain in toolchains

    @property
    def relay_compiler_language(self) -> str:
        return "typescript" if self.typescript else "javascript"

    @classmethod
    def resolve(
        cls,
        project_root: Union[str, Path],
        toolchain: Union[str, Toolchain],
        typescript: bool = False,
        subscriptions: bool = False,
        src: str = "./src",
        schema_file: Optional[str] = None,
        artifact_directory: Optional[str] = None,
        main_file: Optional[str] = None,
        relay_env_file: Optional[str] = None,
    ) -> "ProjectContext":
        """
        Build a context from already-validated arguments, filling every
        location the caller did not supply from the toolchain defaults.

        Raises:
            ConfigError: If the toolchain is unknown or a location is invalid.
        """
        root = Path(project_root).resolve()

        try:
            chain = Toolchain(toolchain)
        except ValueError:
            supported = ", ".join(t.value for t in Toolchain)
            raise ConfigError(
                f"Toolchain '{toolchain}' is not supported. Supported toolchains: {supported}"
            )

        if main_file is None:
            main_file = MAIN_FILE_NO_EXT[chain.value] + MAIN_FILE_EXT[(chain.value, typescript)]

        config_file = None
        if chain == Toolchain.VITE:
            config_file = VITE_CONFIG_FILE_NO_EXT + (".ts" if typescript else ".js")
        elif chain == Toolchain.NEXT:
            config_file = NEXTJS_CONFIG_FILE

        if relay_env_file is None:
            relay_env_file = RELAY_ENV_FILE_NO_EXT + (".ts" if typescript else ".js")

        src_path = ResolvedPath.from_root(root, src)

        if schema_file is None:
            schema_file = str(PurePosixPath(src_path.rel) / SCHEMA_FILE_NAME)
        if not schema_file.endswith(".graphql"):
            raise ConfigError(f"Schema file {schema_file} needs to end in .graphql")

        return cls(
            project_root=root,
            toolchain=chain,
            typescript=typescript,
            subscriptions=subscriptions,
            main_file=ResolvedPath.from_root(root, main_file),
            config_file=ResolvedPath.from_root(root, config_file) if config_file else None,
            relay_env_file=ResolvedPath.from_root(root, relay_env_file),
            schema_file=ResolvedPath.from_root(root, schema_file),
            src_path=src_path,
            artifact_path=(
                ResolvedPath.from_root(root, artifact_directory)
                if artifact_directory else None
            ),
        )
