# src/photogps/exceptions.py


class PhotoGPSError(Exception):
    """Clase base para todas las excepciones de esta aplicación."""

    pass


class DirectoryNotFoundError(PhotoGPSError):
    """Se lanza cuando la carpeta de entrada no existe o no es una carpeta."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Directory does not exist: {path}")


class EmptyInputError(PhotoGPSError):
    """Se lanza cuando el usuario no introduce ninguna ruta."""

    def __init__(self):
        super().__init__("No path provided")


class NoImagesFoundError(PhotoGPSError):
    """Se lanza cuando no hay fotos soportadas en la carpeta."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"No supported photo files found in: {path}")


class NoGPSDataError(PhotoGPSError):
    """Se lanza si ninguna de las fotos procesadas tiene GPS."""

    def __init__(self, total_files=0, folder=""):
        self.total_files = total_files
        self.folder = folder
        super().__init__(
            f"No valid GPS data found in the {total_files} files scanned in {folder}. "
            "Check whether location tagging was enabled on the camera."
        )


class FileProcessingError(PhotoGPSError):
    """Fallo local a un único archivo. Nunca se muestra al usuario."""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not read metadata from {path}{detail}")


class ExportError(PhotoGPSError):
    """Se lanza cuando no se puede escribir un archivo de salida."""

    def __init__(self, path, cause=None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not export {path}{detail}")
