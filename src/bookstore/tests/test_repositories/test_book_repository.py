import pytest

from bookstore.exceptions.base import DuplicateError, InvalidFilterError, NotFoundError


@pytest.fixture
async def shelf(create_book):
    """
    Four books, one of them out of stock:

        id  name     genre  amount
        1   Alpha    1      2
        2   Beta     2      0
        3   Gamma    2      5
        4   Delta    3      1
    """
    return [
        await create_book(name="Alpha", genre=1, amount=2),
        await create_book(name="Beta", genre=2, amount=0),
        await create_book(name="Gamma", genre=2, amount=5),
        await create_book(name="Delta", genre=3, amount=1),
    ]


def names(books) -> list[str]:
    return [book.name for book in books]


@pytest.mark.asyncio
class TestBookRepositoryList:

    async def test_list_without_filters_hides_out_of_stock_newest_first(self, book_repository, shelf):
        books = await book_repository.list_books({})
        assert names(books) == ["Delta", "Gamma", "Alpha"]

    async def test_list_accepts_none(self, book_repository, shelf):
        books = await book_repository.list_books(None)
        assert [book.id for book in books] == [4, 3, 1]

    async def test_list_empty_table(self, book_repository):
        assert await book_repository.list_books({}) == []

    async def test_filter_by_name(self, book_repository, shelf):
        assert names(await book_repository.list_books({"name": ["Gamma"]})) == ["Gamma"]

    async def test_filter_by_name_of_out_of_stock_book_is_empty(self, book_repository, shelf):
        assert await book_repository.list_books({"name": ["Beta"]}) == []

    async def test_filter_by_genre(self, book_repository, shelf):
        assert names(await book_repository.list_books({"genre": ["2"]})) == ["Gamma"]

    async def test_filter_by_name_and_genre(self, book_repository, shelf):
        assert names(await book_repository.list_books({"name": ["Alpha"], "genre": ["1"]})) == ["Alpha"]
        assert await book_repository.list_books({"name": ["Alpha"], "genre": ["2"]}) == []

    async def test_repeated_key_uses_first_value(self, book_repository, shelf):
        assert names(await book_repository.list_books({"genre": ["3", "1"]})) == ["Delta"]

    async def test_genre_range_is_not_checked_by_repository(self, book_repository, shelf):
        assert await book_repository.list_books({"genre": ["7"]}) == []

    async def test_unknown_key_raises_invalid_filter(self, book_repository, shelf):
        with pytest.raises(InvalidFilterError) as exc_info:
            await book_repository.list_books({"author": ["Le Guin"]})

        assert exc_info.value.fields == ["author"]
        assert exc_info.value.to_payload() == {"error": "invalid filter condition"}

    async def test_non_numeric_genre_raises_invalid_filter(self, book_repository, shelf):
        with pytest.raises(InvalidFilterError) as exc_info:
            await book_repository.list_books({"genre": ["fantasy"]})

        assert isinstance(exc_info.value.__cause__, ValueError)

    async def test_key_without_value_raises_invalid_filter(self, book_repository):
        with pytest.raises(InvalidFilterError):
            await book_repository.list_books({"name": []})


@pytest.mark.asyncio
class TestBookRepositoryWrites:

    async def test_create_book_returns_id(self, book_repository, sample_book_data):
        assert await book_repository.create_book(sample_book_data) == 1

    async def test_create_book_ignores_client_id(self, book_repository, sample_book_data):
        book_id = await book_repository.create_book({**sample_book_data, "id": 42})

        assert book_id == 1
        with pytest.raises(NotFoundError):
            await book_repository.get_by_id(42)

    async def test_create_book_duplicate_name(self, book_repository, sample_book_data):
        await book_repository.create_book(sample_book_data)

        with pytest.raises(DuplicateError) as exc_info:
            await book_repository.create_book(sample_book_data)

        assert exc_info.value.to_payload() == {"error": "input book name is not unique"}
        assert exc_info.value.http_status() == 500

    async def test_round_trip(self, book_repository, sample_book_data):
        book_id = await book_repository.create_book(sample_book_data)
        book = await book_repository.get_by_id(book_id)

        assert {
            "name": book.name,
            "price": book.price,
            "genre": book.genre,
            "amount": book.amount,
        } == sample_book_data

    async def test_update_book_ignores_client_id(self, book_repository, created_book):
        updated = await book_repository.update_book(
            created_book.id,
            {"id": 99, "name": "New", "price": 1.5, "genre": 2, "amount": 9},
        )

        assert updated.id == created_book.id
        assert updated.name == "New"

    async def test_update_book_missing(self, book_repository, sample_book_data):
        with pytest.raises(NotFoundError):
            await book_repository.update_book(256, sample_book_data)
