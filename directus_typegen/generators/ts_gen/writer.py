"""File writer for TypeScript declaration generation."""
from pathlib import Path
from typing import List

from directus_typegen.core.errors import OutputWriteError
from directus_typegen.generators.ts_gen.types import GeneratedFile


def write_files(files: List[GeneratedFile], out_dir: Path) -> List[Path]:
    """
    Write generated files to the output directory.

    Args:
        files: List of GeneratedFile objects to write
        out_dir: Base output directory path, created with its parents

    Returns:
        Paths of the written files
    """
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(out_dir, e) from e

    written = []
    for file in files:
        file_path = out_dir / file.path
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(file.content, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(file_path, e) from e
        written.append(file_path)
    return written
