"""Unit tests for status classification."""

import pytest

from url_fetcher.fetch.config import FetchMethod
from url_fetcher.fetch.status import StatusClass, body_permitted, classify_status


class TestClassifyStatus:
    """Tests for classify_status."""

    @pytest.mark.parametrize("status", [200, 201, 204, 206, 299])
    def test_success(self, status: int) -> None:
        """2xx is success."""
        assert classify_status(status) == StatusClass.SUCCESS

    @pytest.mark.parametrize("status", [300, 301, 302, 303, 304, 307, 308])
    def test_redirection(self, status: int) -> None:
        """3xx is redirection."""
        assert classify_status(status) == StatusClass.REDIRECTION

    @pytest.mark.parametrize("status", [100, 199, 400, 404, 429, 500, 599])
    def test_other(self, status: int) -> None:
        """Everything else is other."""
        assert classify_status(status) == StatusClass.OTHER


class TestBodyPermitted:
    """Tests for body_permitted."""

    def test_get_200(self) -> None:
        """GET 200 carries a body."""
        assert body_permitted(FetchMethod.GET, 200) is True

    def test_post_201(self) -> None:
        """POST 201 carries a body."""
        assert body_permitted(FetchMethod.POST, 201) is True

    @pytest.mark.parametrize("status", [200, 206])
    def test_head_never(self, status: int) -> None:
        """HEAD responses never carry a body."""
        assert body_permitted(FetchMethod.HEAD, status) is False

    @pytest.mark.parametrize("status", [204, 205])
    def test_bodyless_statuses(self, status: int) -> None:
        """204 and 205 never carry a body."""
        assert body_permitted(FetchMethod.GET, status) is False
