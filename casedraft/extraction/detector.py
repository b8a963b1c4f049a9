"""File type sniffing from leading magic bytes."""

_PDF = b"%PDF"
_ZIP = b"PK\x03\x04"
_JPEG = b"\xff\xd8"
_PNG = b"\x89PNG\r\n\x1a\n"


def detect_file_type(data: bytes) -> str:
    """Guess a type hint from the file signature. Unknown content maps to 'txt'."""
    if data.startswith(_PDF):
        return "pdf"
    if data.startswith(_ZIP):
        return "docx"
    if data.startswith(_JPEG):
        return "jpeg"
    if data.startswith(_PNG):
        return "png"
    return "txt"
