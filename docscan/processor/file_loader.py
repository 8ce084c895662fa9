from pathlib import Path


class FileLoader:
    """Resolves a document's stored file path and reads its bytes.

    Absolute paths are used as-is; relative ones are resolved against
    ``files_root``.
    """

    def __init__(self, files_root: Path | str = ".") -> None:
        self._files_root = Path(files_root)

    def resolve(self, file_path: str) -> Path:
        path = Path(file_path)
        return path if path.is_absolute() else self._files_root / path

    def exists(self, file_path: str | None) -> bool:
        if not file_path:
            return False
        return self.resolve(file_path).is_file()

    def load(self, file_path: str) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
        """
        path = self.resolve(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()
