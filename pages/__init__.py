"""Page objects. Importing this package registers every page with page_registry."""
from .google_page import GooglePage
from .upload_page import UploadPage

__all__ = ['GooglePage', 'UploadPage']
