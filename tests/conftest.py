# File: tests/conftest.py
"""
Фейковая поверхность Playwright для тестов без настоящего браузера.

Страница (FakePage) хранит текущее "представление" (FakeView): элементы
по CSS-селекторам и по ролям. Клики по элементам вызывают on_click,
который может переключить представление, открыть модальное окно
или породить новую вкладку в контексте.
"""
import asyncio
import re
from typing import Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from offer_finder.browser import BrowserSession
from offer_finder.matchers import CARD_OR_OFFER_SELECTOR
from offer_finder.scrapers.bank_site_resolver import BankSiteResolver

DIRECTORY_URL = "https://directory.test/search"
BANK_URL = "https://examplebank.com"


class FakeElement:
    def __init__(
        self,
        text: str = "",
        *,
        visible: bool = True,
        on_click: Optional[Callable] = None,
        click_error: Optional[str] = None,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        roles: Optional[Dict[str, List["FakeElement"]]] = None,
    ):
        self.text = text
        self.visible = visible
        self.on_click = on_click
        self.click_error = click_error
        self.children = children or {}
        self.roles = roles or {}
        self.clicks = 0


class FakeView:
    def __init__(self, selectors=None, roles=None):
        self.selectors: Dict[str, List[FakeElement]] = selectors or {}
        self.roles: Dict[str, List[FakeElement]] = roles or {}


def _by_role(roles, role, name) -> List[FakeElement]:
    elements = roles.get(role, [])
    if name is None:
        return list(elements)
    if isinstance(name, re.Pattern):
        return [el for el in elements if name.search(el.text)]
    return [el for el in elements if name.lower() in el.text.lower()]


class FakeLocator:
    def __init__(self, page: "FakePage", resolve: Callable[[], List[FakeElement]]):
        self._page = page
        self._resolve = resolve

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._page, lambda: self._resolve()[:1])

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(
            self._page,
            lambda: [c for el in self._resolve() for c in el.children.get(selector, [])],
        )

    def get_by_role(self, role: str, name=None) -> "FakeLocator":
        return FakeLocator(
            self._page,
            lambda: [c for el in self._resolve() for c in _by_role(el.roles, role, name)],
        )

    async def count(self) -> int:
        return len(self._resolve())

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None):
        self._page.waits.append((state, timeout))
        elements = self._resolve()
        if state == "visible":
            elements = [el for el in elements if el.visible]
        if not elements:
            raise PlaywrightTimeoutError(
                f"Locator.wait_for: Timeout {timeout}ms exceeded.\nCall log:\n  - waiting"
            )

    async def click(self, timeout: Optional[float] = None):
        elements = self._resolve()
        if not elements:
            raise PlaywrightTimeoutError(f"Locator.click: Timeout {timeout}ms exceeded.")
        element = elements[0]
        if element.click_error:
            raise PlaywrightError(element.click_error)
        element.clicks += 1
        self._page.click_timeouts.append(timeout)
        if element.on_click:
            element.on_click(self._page)

    async def all_inner_texts(self) -> List[str]:
        return [el.text for el in self._resolve()]


class FakePage:
    def __init__(self, context: "FakeContext", url: str = "about:blank"):
        self.context = context
        self.url = url
        self.view = context.routes.get(url, FakeView())
        self.closed = False
        self.default_timeout = None
        self.goto_calls = []
        self.waits = []
        self.click_timeouts = []
        self.load_states = []
        self.filled = {}
        self.on_submit: Optional[Callable] = context.on_submit

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    def navigate(self, url: str):
        self.url = url
        self.view = self.context.routes.get(url, FakeView())

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if url not in self.context.routes:
            raise PlaywrightTimeoutError(f"Page.goto: Timeout {timeout}ms exceeded.")
        self.navigate(url)

    async def fill(self, selector, value):
        self.filled[selector] = value

    async def press(self, selector, key):
        if key == "Enter" and self.on_submit:
            self.on_submit(self, self.filled.get(selector))

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda: list(self.view.selectors.get(selector, [])))

    def get_by_role(self, role: str, name=None) -> FakeLocator:
        return FakeLocator(self, lambda: _by_role(self.view.roles, role, name))

    async def wait_for_load_state(self, state=None, timeout=None):
        self.load_states.append(state)

    async def close(self):
        self.closed = True

    def is_closed(self) -> bool:
        return self.closed


class FakeContext:
    def __init__(self, routes: Optional[Dict[str, FakeView]] = None, on_submit=None):
        self.routes = routes or {}
        self.on_submit = on_submit
        self.pages: List[FakePage] = []
        self.closed = False
        self._opened: List[FakePage] = []

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    def open_tab(self, url: str) -> FakePage:
        """Новая вкладка, как при клике по ссылке с target=_blank."""
        page = FakePage(self, url)
        self.pages.append(page)
        self._opened.append(page)
        return page

    async def wait_for_event(self, event: str, timeout: Optional[float] = None):
        assert event == "page"
        for _ in range(20):
            if self._opened:
                return self._opened.pop(0)
            await asyncio.sleep(0.01)
        raise PlaywrightTimeoutError(
            f'Timeout {timeout}ms exceeded while waiting for event "page"'
        )

    async def close(self):
        for page in self.pages:
            page.closed = True
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.closed = False

    async def close(self):
        self.closed = True


class FakePlaywright:
    def __init__(self):
        self.stopped = False

    async def stop(self):
        self.stopped = True


def make_session(context: FakeContext, timeout: float = 1.0) -> BrowserSession:
    """BrowserSession с подмененными объектами Playwright: start() ничего не запускает."""
    session = BrowserSession(timeout=timeout, user_agent="TestAgent/1.0")
    session._playwright = FakePlaywright()
    session._browser = FakeBrowser()
    session._context = context
    return session


def directory_routes(
    website_url: Optional[str] = BANK_URL,
    *,
    with_result: bool = True,
    with_modal: bool = True,
    opens_tab: bool = True,
):
    """
    Реестр банков: страница поиска, первый результат со ссылкой на сайт,
    окно подтверждения и кнопка Continue, открывающая новую вкладку.

    Returns:
        (routes, on_submit)
    """
    search_view = FakeView()

    def open_tab(page):
        if opens_tab:
            page.context.open_tab(website_url)

    continue_button = FakeElement("Continue", on_click=open_tab)
    modal = FakeElement(
        "You are leaving the FDIC website", roles={"button": [continue_button]}
    )

    def show_modal(page):
        if with_modal:
            page.view.selectors[BankSiteResolver.LEAVING_MODAL_SELECTOR] = [modal]

    children = {}
    if website_url is not None:
        children[BankSiteResolver.WEBSITE_LINK_SELECTOR] = [
            FakeElement("Primary Website", on_click=show_modal)
        ]
    result = FakeElement("Example Bank", children=children)

    def on_submit(page, query):
        if with_result:
            page.view.selectors[BankSiteResolver.FIRST_RESULT_SELECTOR] = [result]

    return {DIRECTORY_URL: search_view}, on_submit


def bank_site_routes(
    offer_text: str = "0% Introductory APR for Business members",
    *,
    with_cookie_banner: bool = True,
    with_business_path: bool = True,
):
    """
    Сайт банка: главная -> Small Business -> Business Credit Cards,
    на последней странице секция с классом offer-card.
    """
    cards_url = f"{BANK_URL}/business/credit-cards"
    business_url = f"{BANK_URL}/business"

    def go(url):
        return lambda page: page.navigate(url)

    home_roles = {}
    if with_cookie_banner:
        home_roles["button"] = [FakeElement("Accept All Cookies")]
    if with_business_path:
        home_roles["link"] = [
            FakeElement("Personal"),
            FakeElement("Small Business", on_click=go(business_url)),
        ]

    sections = [FakeElement(offer_text)] if offer_text is not None else []
    return {
        BANK_URL: FakeView(
            selectors={CARD_OR_OFFER_SELECTOR: [] if with_business_path else sections},
            roles=home_roles,
        ),
        business_url: FakeView(
            roles={"link": [FakeElement("Business Credit Cards", on_click=go(cards_url))]}
        ),
        cards_url: FakeView(selectors={CARD_OR_OFFER_SELECTOR: sections}),
    }


@pytest.fixture()
def fake_context() -> FakeContext:
    routes, on_submit = directory_routes()
    routes.update(bank_site_routes())
    return FakeContext(routes, on_submit=on_submit)


@pytest.fixture()
def session(fake_context) -> BrowserSession:
    return make_session(fake_context)
