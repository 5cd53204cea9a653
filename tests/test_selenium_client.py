"""Unit tests for SeleniumProtocolClient."""

from unittest.mock import PropertyMock

import pytest
from selenium.common.exceptions import (
    StaleElementReferenceException,
    InvalidSelectorException,
)
from selenium.webdriver.common.by import By

from selenium_query.core.exceptions import (
    InvalidSelectorError,
    SessionClosedError,
    StaleElementError,
)
from selenium_query.core.protocol import ElementHandle, ElementRect
from selenium_query.core.selenium_client import OBSCURED_SCRIPT, SeleniumProtocolClient
from selenium_query.query.selectors import Selector


@pytest.fixture
def client(mock_webdriver):
    return SeleniumProtocolClient(mock_webdriver)


@pytest.fixture
def handle(mock_webelement):
    return ElementHandle(mock_webelement.id, native=mock_webelement)


class TestFindElements:
    """Tests for element lookup."""

    @pytest.mark.asyncio
    async def test_find_from_root(self, client, mock_webdriver, mock_webelement):
        """Should search the whole document and wrap results in handles."""
        handles = await client.find_elements(Selector.css("button.submit"))

        mock_webdriver.find_elements.assert_called_once_with(By.CSS_SELECTOR, "button.submit")
        assert handles == [ElementHandle("el-1")]
        assert handles[0].native is mock_webelement

    @pytest.mark.asyncio
    async def test_find_within_scope(self, client, mock_webdriver, mock_webelement, handle):
        """Should search beneath the scope element only."""
        await client.find_elements(Selector.tag("span"), scope=handle)

        mock_webelement.find_elements.assert_called_once_with(By.TAG_NAME, "span")
        mock_webdriver.find_elements.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_selector_mapped(self, client, mock_webdriver):
        """Should translate InvalidSelectorException."""
        mock_webdriver.find_elements.side_effect = InvalidSelectorException("bad css")

        with pytest.raises(InvalidSelectorError) as exc:
            await client.find_elements(Selector.css("[["))

        assert isinstance(exc.value.__cause__, InvalidSelectorException)


class TestElementReads:
    """Tests for element state reads."""

    @pytest.mark.asyncio
    async def test_text_and_tag(self, client, handle):
        assert await client.text(handle) == "Click Me"
        assert await client.tag_name(handle) == "button"

    @pytest.mark.asyncio
    async def test_attribute(self, client, mock_webelement, handle):
        mock_webelement.get_attribute.return_value = "primary large"

        assert await client.attribute(handle, "class") == "primary large"
        assert await client.class_list(handle) == {"primary", "large"}
        mock_webelement.get_attribute.assert_called_with("class")

    @pytest.mark.asyncio
    async def test_missing_class_attribute(self, client, handle):
        assert await client.class_list(handle) == set()

    @pytest.mark.asyncio
    async def test_property_and_css(self, client, mock_webelement, handle):
        mock_webelement.get_property.return_value = "hello"

        assert await client.dom_property(handle, "value") == "hello"
        assert await client.css_value(handle, "cursor") == "pointer"

    @pytest.mark.asyncio
    async def test_rect(self, client, handle):
        rect = await client.rect(handle)

        assert rect == ElementRect(100, 200, 80, 30)
        assert rect.center == (140, 215)

    @pytest.mark.asyncio
    async def test_stale_element_mapped(self, client, mock_webelement, handle):
        """Should raise StaleElementError carrying the handle's id."""
        mock_webelement.is_displayed.side_effect = StaleElementReferenceException("stale")

        with pytest.raises(StaleElementError) as exc:
            await client.is_displayed(handle)

        assert exc.value.element_id == "el-1"
        assert await client.is_present(handle) is True

    @pytest.mark.asyncio
    async def test_is_present_false_when_stale(self, client, handle, mock_webelement):
        type(mock_webelement).tag_name = PropertyMock(
            side_effect=StaleElementReferenceException("stale")
        )

        assert await client.is_present(handle) is False


class TestClickable:
    """Tests for the clickable composite check."""

    @pytest.mark.asyncio
    async def test_clickable(self, client, mock_webdriver, handle, mock_webelement):
        """Should run the obscured script against the element."""
        assert await client.is_clickable(handle) is True

        mock_webdriver.execute_script.assert_called_once_with(OBSCURED_SCRIPT, mock_webelement)

    @pytest.mark.asyncio
    async def test_obscured_not_clickable(self, client, mock_webdriver, handle):
        mock_webdriver.execute_script.return_value = True

        assert await client.is_clickable(handle) is False

    @pytest.mark.asyncio
    async def test_hidden_short_circuits(self, client, mock_webdriver, mock_webelement, handle):
        """Should skip the enabled and obscured checks when hidden."""
        mock_webelement.is_displayed.return_value = False

        assert await client.is_clickable(handle) is False
        mock_webelement.is_enabled.assert_not_called()
        mock_webdriver.execute_script.assert_not_called()


class TestQuit:
    """Tests for session shutdown."""

    @pytest.mark.asyncio
    async def test_quit_closes_client(self, client, mock_webdriver, handle):
        await client.quit()

        mock_webdriver.quit.assert_called_once()
        assert client.closed is True
        with pytest.raises(SessionClosedError):
            await client.text(handle)

    @pytest.mark.asyncio
    async def test_quit_twice(self, client, mock_webdriver):
        await client.quit()
        await client.quit()

        mock_webdriver.quit.assert_called_once()

    def test_session_id(self, client):
        assert client.session_id == "mock-session-id"
