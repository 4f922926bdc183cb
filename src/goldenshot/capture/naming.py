"""
Golden file naming and path resolution.

Naming strategies turn a test identity into a file name; the file path
strategy decides what relative golden paths are resolved against.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path, PurePosixPath

DEFAULT_EXTENSION = "png"


class NamingStrategy(StrEnum):
    """How a test identity maps to a golden file name."""

    TEST_PACKAGE_AND_CLASS_AND_METHOD = "testPackageAndClassAndMethod"
    """com.example.MyTest.testMethod.png"""

    ESCAPED_TEST_PACKAGE_AND_CLASS_AND_METHOD = "escapedTestPackageAndClassAndMethod"
    """com_example_MyTest.testMethod.png"""

    TEST_CLASS_AND_METHOD = "testClassAndMethod"
    """MyTest.testMethod.png"""


class FilePathStrategy(StrEnum):
    """What relative golden file paths are resolved against."""

    RELATIVE_PATH_FROM_CURRENT_DIRECTORY = "relativePathFromCurrentDirectory"
    RELATIVE_PATH_FROM_OUTPUT_DIRECTORY = "relativePathFromOutputDirectory"


@dataclass(frozen=True, slots=True)
class CaptureIdentity:
    """Identity of the test performing a capture."""

    package: str
    class_name: str
    method: str

    @classmethod
    def from_pytest_nodeid(cls, nodeid: str) -> CaptureIdentity:
        """
        Derive an identity from a pytest node id.

        ``tests/ui/test_home.py::TestHome::test_header[dark]`` becomes package
        ``tests.ui.test_home``, class ``TestHome`` and method
        ``test_header[dark]``. Module-level tests use the module name as class.
        """
        parts = nodeid.split("::")
        if len(parts) < 2 or not parts[0]:
            raise ValueError(f"Not a pytest node id: {nodeid!r}")

        module_path = PurePosixPath(parts[0].replace("\\", "/"))
        module_parts = [*module_path.parent.parts, module_path.stem]
        module_parts = [p for p in module_parts if p not in ("", ".")]
        method = parts[-1]

        if len(parts) >= 3:
            return cls(
                package=".".join(module_parts),
                class_name=".".join(parts[1:-1]),
                method=method,
            )
        return cls(
            package=".".join(module_parts[:-1]),
            class_name=module_parts[-1],
            method=method,
        )

    def file_name(
        self,
        strategy: NamingStrategy = NamingStrategy.TEST_PACKAGE_AND_CLASS_AND_METHOD,
        extension: str = DEFAULT_EXTENSION,
    ) -> str:
        match strategy:
            case NamingStrategy.TEST_PACKAGE_AND_CLASS_AND_METHOD:
                qualified = f"{self.package}.{self.class_name}" if self.package else self.class_name
                stem = f"{qualified}.{self.method}"
            case NamingStrategy.ESCAPED_TEST_PACKAGE_AND_CLASS_AND_METHOD:
                qualified = f"{self.package}.{self.class_name}" if self.package else self.class_name
                stem = f"{qualified.replace('.', '_')}.{self.method}"
            case NamingStrategy.TEST_CLASS_AND_METHOD:
                stem = f"{self.class_name}.{self.method}"
            case _:
                raise ValueError(f"Unknown naming strategy: {strategy}")
        return f"{stem}.{extension}"


def resolve_golden_path(
    path: str | Path,
    strategy: FilePathStrategy = FilePathStrategy.RELATIVE_PATH_FROM_CURRENT_DIRECTORY,
    output_directory: str | Path | None = None,
) -> Path:
    """
    Resolve a golden file path to an absolute path.

    Absolute paths are returned unchanged. With the output directory strategy,
    a relative path that already starts with the output directory is not
    prefixed twice.
    """
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate

    if strategy is FilePathStrategy.RELATIVE_PATH_FROM_OUTPUT_DIRECTORY and output_directory:
        base = Path(output_directory).absolute()
        if not candidate.absolute().is_relative_to(base):
            candidate = base / candidate

    return candidate.absolute()


def golden_path_for(
    identity: CaptureIdentity,
    output_directory: str | Path,
    naming_strategy: NamingStrategy = NamingStrategy.TEST_PACKAGE_AND_CLASS_AND_METHOD,
) -> Path:
    """Default golden file location for a test identity."""
    return (Path(output_directory) / identity.file_name(naming_strategy)).absolute()


def sibling_path(golden_file: Path, output_directory: Path, suffix: str) -> Path:
    """Path next to the golden name in the output directory, e.g. ``name_compare.png``."""
    name = f"{golden_file.stem}_{suffix}{golden_file.suffix or '.png'}"
    return (Path(output_directory) / name).absolute()
