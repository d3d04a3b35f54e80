"""
Favorites API Backend: Favorite Service Unit Tests
===================================================

What:  Tests FavoriteService validation and error translation.
How:   Mock AsyncSession: no database, so we can assert exactly which
       statements were (not) issued and that failures roll back.
"""

import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from favorites_api.exceptions import DatabaseError, ValidationError
from favorites_api.schemas.favorite import FavoriteCreate
from favorites_api.services.favorite_service import FavoriteService, parse_recipe_id


def driver_error() -> OperationalError:
    return OperationalError("INSERT INTO favorites ...", {}, Exception("connection reset"))


class TestAddFavorite:

    def setup_method(self):
        self.service = FavoriteService()

    @pytest.mark.asyncio
    async def test_missing_fields_issue_no_sql(self, mock_db_session):
        payload = FavoriteCreate(title="Soup")

        with pytest.raises(ValidationError, match="Missing required fields"):
            await self.service.add_favorite(mock_db_session, payload)

        mock_db_session.execute.assert_not_awaited()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_and_commit(self, mock_db_session):
        stored = MagicMock(id=1, user_id="u1", recipe_id=42)
        result = MagicMock()
        result.scalar_one.return_value = stored
        mock_db_session.execute.return_value = result

        payload = FavoriteCreate(user_id="u1", recipe_id=42, title="Soup")
        favorite = await self.service.add_favorite(mock_db_session, payload)

        assert favorite is stored
        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_accepts_camel_case_input(self, mock_db_session):
        result = MagicMock()
        result.scalar_one.return_value = MagicMock(id=1)
        mock_db_session.execute.return_value = result

        payload = FavoriteCreate.model_validate(
            {"userId": "u1", "recipeId": 42, "title": "Soup", "cookTime": "1h"}
        )
        await self.service.add_favorite(mock_db_session, payload)

        statement = mock_db_session.execute.await_args.args[0]
        params = statement.compile().params
        assert params["user_id"] == "u1"
        assert params["recipe_id"] == 42
        assert params["cook_time"] == "1h"

    @pytest.mark.asyncio
    async def test_database_error_rolls_back(self, mock_db_session):
        mock_db_session.execute.side_effect = driver_error()
        payload = FavoriteCreate(user_id="u1", recipe_id=42, title="Soup")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.add_favorite(mock_db_session, payload)

        assert exc_info.value.message == "Something went wrong"
        assert exc_info.value.context["operation"] == "add_favorite"
        mock_db_session.rollback.assert_awaited_once()


class TestListFavorites:

    def setup_method(self):
        self.service = FavoriteService()

    @pytest.mark.asyncio
    async def test_returns_rows(self, mock_db_session):
        rows = [MagicMock(id=1), MagicMock(id=2)]
        result = MagicMock()
        result.scalars.return_value.all.return_value = rows
        mock_db_session.execute.return_value = result

        favorites = await self.service.list_favorites(mock_db_session, "u1")

        assert favorites == rows

    @pytest.mark.asyncio
    async def test_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = driver_error()

        with pytest.raises(DatabaseError):
            await self.service.list_favorites(mock_db_session, "u1")


class TestRemoveFavorite:

    def setup_method(self):
        self.service = FavoriteService()

    @pytest.mark.asyncio
    async def test_returns_rowcount(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=2)

        removed = await self.service.remove_favorite(mock_db_session, "u1", 42)

        assert removed == 2
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nothing_matched_is_not_an_error(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(rowcount=0)

        assert await self.service.remove_favorite(mock_db_session, "u1", 42) == 0

    @pytest.mark.asyncio
    async def test_database_error_rolls_back(self, mock_db_session):
        mock_db_session.commit.side_effect = driver_error()
        mock_db_session.execute.return_value = MagicMock(rowcount=1)

        with pytest.raises(DatabaseError):
            await self.service.remove_favorite(mock_db_session, "u1", 42)

        mock_db_session.rollback.assert_awaited_once()


class TestParseRecipeId:

    def test_integer(self):
        assert parse_recipe_id("42") == 42

    def test_surrounding_whitespace(self):
        assert parse_recipe_id(" 7 ") == 7

    @pytest.mark.parametrize("raw", ["soup", "4.2", "", "4_2", "٤٢", "0x2a"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError, match="Invalid recipeId"):
            parse_recipe_id(raw)
