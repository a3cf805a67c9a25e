"""
HTTP handlers for the `/books` resource.

Handlers only decode and validate input, call the repository and shape the
response. Errors raised here or by the repository are rendered by
`bookstore.api.v1.error_handlers`.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from bookstore.core.dependencies import get_book_repository
from bookstore.repositories.book_repository import BookRepository
from bookstore.schemas.book import BookCreated, BookPayload, BookRead, ErrorResponse
from bookstore.validators.book_validators import parse_book_filter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

_ID_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    404: {"model": ErrorResponse, "description": "Id not found"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}


@router.get(
    "",
    response_model=list[BookRead],
    responses={400: {"model": ErrorResponse, "description": "Invalid filter condition"}},
)
async def list_books(request: Request, repo: BookRepository = Depends(get_book_repository)) -> list[BookRead]:
    """
    List books in stock, newest first.

    Optional query parameters: `name` (exact match) and `genre` (1, 2 or 3).
    """
    filters = parse_book_filter(request.query_params.multi_items())
    books = await repo.list_books(filters)
    return [BookRead.model_validate(book) for book in books]


@router.post("", response_model=BookCreated, responses={400: _ID_ERRORS[400], 500: _ID_ERRORS[500]})
async def create_book(payload: BookPayload, repo: BookRepository = Depends(get_book_repository)) -> BookCreated:
    book_id = await repo.create_book(payload.model_dump())
    return BookCreated(id=book_id)


@router.get("/{book_id}", response_model=BookRead, responses=_ID_ERRORS)
async def get_book(book_id: int, repo: BookRepository = Depends(get_book_repository)) -> BookRead:
    book = await repo.get_by_id(book_id)
    return BookRead.model_validate(book)


@router.put("/{book_id}", response_model=BookRead, responses=_ID_ERRORS)
async def update_book(
    book_id: int,
    payload: BookPayload,
    repo: BookRepository = Depends(get_book_repository),
) -> BookRead:
    """Replace every field of a book. The path id wins over any id in the body."""
    book = await repo.update_book(book_id, payload.model_dump())
    return BookRead(id=book_id, name=book.name, price=book.price, genre=book.genre, amount=book.amount)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, responses=_ID_ERRORS)
async def delete_book(book_id: int, repo: BookRepository = Depends(get_book_repository)) -> Response:
    await repo.delete(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
