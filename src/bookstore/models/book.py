from sqlalchemy import Integer, Numeric, String, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from bookstore.database.base import Base

# Genre codes accepted at the API boundary. The table itself does not restrict genre.
VALID_GENRES = frozenset({1, 2, 3})

NAME_MAX_LENGTH = 100


class Book(Base):
    """
    SQLAlchemy model for Book, the only entity of the service.

    `amount` is the number of copies in stock; books with no stock stay in the
    table but are hidden from listings.
    """
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("amount >= 0", name="amount_non_negative"),
    )

    # Server-assigned identifier (SERIAL on Postgres, ROWID alias on SQLite)
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Title (unique across all books)
    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH),
        unique=True,
        nullable=False,
    )

    # Returned as float so it serializes as a plain JSON number
    price: Mapped[float] = mapped_column(
        Numeric(asdecimal=False),
        nullable=False,
    )

    genre: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    amount: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id!r}, name={self.name!r}, genre={self.genre!r}, amount={self.amount!r})>"
