from .book import BookPayload, BookRead, BookCreated, ErrorResponse

__all__ = ["BookPayload", "BookRead", "BookCreated", "ErrorResponse"]
