from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.database.session import Database
from bookstore.repositories.book_repository import BookRepository


def get_database(request: Request) -> Database:
    # Created by the app factory, opened and closed by the lifespan
    return request.app.state.database


async def get_db_session(database: Database = Depends(get_database)) -> AsyncGenerator[AsyncSession, None]:
    # One session per request; repositories open one transaction per operation
    async with database.session() as session:
        yield session


async def get_book_repository(session: AsyncSession = Depends(get_db_session)) -> BookRepository:
    return BookRepository(session)
