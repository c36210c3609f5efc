"""
Playwright Browser - Implementation of the form page interfaces using Playwright.

This module provides a Playwright-based implementation of IFormPage and
IFormElement, plus a small browser launcher for the CLI.
"""

from typing import Any, Dict, List
import logging
import uuid

from autoform_filler.interfaces.browser import (
    BrowserType,
    FieldSnapshot,
    HINT_ATTRIBUTES,
    IFormElement,
    IFormPage,
    IMutationSubscription,
    MutationCallback,
)
from autoform_filler.exceptions.browser import (
    BrowserConnectionError,
    BrowserLaunchError,
    NavigationError,
    StaleElementError,
)

logger = logging.getLogger(__name__)

FORM_CONTROL_SELECTOR = "input, textarea, select"

MUTATION_BINDING = "__autoformMutation"

# Describes one control and the label text around it
SNAPSHOT_JS = """
(el, hintAttributes) => {
    const tag = el.tagName.toLowerCase();
    const textOf = (node) => {
        if (!node) return '';
        return ((node.innerText !== undefined ? node.innerText : node.textContent) || '').trim();
    };

    const attributes = {};
    for (const name of hintAttributes) {
        const value = el.getAttribute(name);
        if (value) attributes[name] = value;
    }

    let labelForText = '';
    if (el.id) {
        const label = document.querySelector(`label[for="${CSS.escape(el.id)}"]`);
        if (label) labelForText = textOf(label);
    }

    let wrappingLabelText = '';
    const wrapper = el.closest('label');
    if (wrapper) {
        const clone = wrapper.cloneNode(true);
        clone.querySelectorAll('input, textarea, select').forEach((n) => n.remove());
        wrappingLabelText = (clone.textContent || '').trim();
    }

    // A select's innerText is its option list, never label text
    const siblingText = (node) => {
        if (node.matches('input, textarea, select')) return '';
        if (!node.querySelector('textarea, select')) return textOf(node);
        const clone = node.cloneNode(true);
        clone.querySelectorAll('input, textarea, select').forEach((n) => n.remove());
        return (clone.textContent || '').trim();
    };

    const precedingSiblings = [];
    let prev = el.previousElementSibling;
    while (prev && precedingSiblings.length < 3) {
        precedingSiblings.push({ tag_name: prev.tagName.toLowerCase(), text: siblingText(prev) });
        prev = prev.previousElementSibling;
    }

    const labelledby = (el.getAttribute('aria-labelledby') || '')
        .split(/\\s+/)
        .filter(Boolean)
        .map((id) => textOf(document.getElementById(id)))
        .filter(Boolean)
        .join(' ');

    const style = window.getComputedStyle(el);
    const rendered = typeof el.checkVisibility === 'function' ? el.checkVisibility() : true;

    const options = tag === 'select'
        ? Array.from(el.options).map((o) => ({ value: o.value, text: (o.text || '').trim() }))
        : [];

    return {
        tag_name: tag,
        input_type: tag === 'input' ? (el.type || 'text').toLowerCase() : tag,
        value: el.value == null ? '' : String(el.value),
        disabled: !!el.disabled,
        display: style.display,
        visibility: style.visibility,
        rendered: rendered,
        attributes: attributes,
        label_for_text: labelForText,
        wrapping_label_text: wrappingLabelText,
        preceding_siblings: precedingSiblings,
        labelledby_text: labelledby,
        options: options,
    };
}
"""

# Native prototype setter so instance-level overrides (React's value
# tracker) see the change, then the events frameworks listen for.
# Reports whether the value took: sanitizing types (number, date) and
# controlled inputs can reject it.
APPLY_VALUE_JS = """
(el, [value, focus]) => {
    if (el.value === value) return false;

    let proto = HTMLInputElement.prototype;
    if (el instanceof HTMLTextAreaElement) proto = HTMLTextAreaElement.prototype;
    else if (el instanceof HTMLSelectElement) proto = HTMLSelectElement.prototype;
    const descriptor = Object.getOwnPropertyDescriptor(proto, 'value');

    if (focus) el.focus();
    if (descriptor && descriptor.set) {
        descriptor.set.call(el, value);
    } else {
        el.value = value;
    }
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    if (focus) el.blur();
    return el.value === value;
}
"""

OBSERVE_JS = """
([binding, token]) => {
    const registry = window.__autoformObservers || (window.__autoformObservers = {});
    if (registry[token]) return;
    const observer = new MutationObserver((records) => {
        window[binding](token, records.length);
    });
    observer.observe(document.documentElement, {
        childList: true,
        subtree: true,
        attributes: true,
        attributeFilter: ['style', 'class', 'hidden', 'disabled'],
    });
    registry[token] = observer;
}
"""

DISCONNECT_JS = """
(token) => {
    const registry = window.__autoformObservers;
    if (registry && registry[token]) {
        registry[token].disconnect();
        delete registry[token];
    }
}
"""


class PlaywrightFormElement(IFormElement):
    """
    Playwright implementation of IFormElement.

    Wraps a Playwright ElementHandle for inspection and writing.
    """

    def __init__(self, element: Any):
        """
        Initialize the element wrapper.

        Args:
            element: Playwright ElementHandle
        """
        self._element = element

    async def snapshot(self) -> FieldSnapshot:
        """Describe the control."""
        try:
            data = await self._element.evaluate(SNAPSHOT_JS, list(HINT_ATTRIBUTES))
        except Exception as e:
            raise StaleElementError(f"Could not inspect control: {e}", operation="snapshot")
        return FieldSnapshot.from_dict(data)

    async def apply_value(self, value: str, focus: bool = True) -> bool:
        """Write the value with native setter and input/change events."""
        try:
            return bool(await self._element.evaluate(APPLY_VALUE_JS, [value, focus]))
        except Exception as e:
            raise StaleElementError(f"Could not write control: {e}", operation="apply_value")


class PlaywrightMutationSubscription(IMutationSubscription):
    """A MutationObserver installed in the page, keyed by token."""

    def __init__(self, page: "PlaywrightFormPage", token: str):
        self._page = page
        self._token = token
        self._disposed = False

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._page._mutation_callbacks.pop(self._token, None)
        try:
            await self._page.raw.evaluate(DISCONNECT_JS, self._token)
        except Exception as e:
            # The page navigated or closed, which took the observer with it
            logger.debug(f"Observer disconnect skipped: {e}")


class PlaywrightFormPage(IFormPage):
    """
    Playwright implementation of IFormPage.

    Wraps a Playwright Page for navigation, control discovery and
    mutation observation.
    """

    def __init__(self, page: Any):
        """
        Initialize the page wrapper.

        Args:
            page: Playwright Page object
        """
        self._page = page
        self._binding_installed = False
        self._mutation_callbacks: Dict[str, MutationCallback] = {}

    @property
    def raw(self) -> Any:
        """The wrapped Playwright Page."""
        return self._page

    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url

    async def goto(self, url: str, **options: Any) -> None:
        """Navigate to URL."""
        try:
            await self._page.goto(url, **options)
        except Exception as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url)

    async def query_form_controls(self) -> List[IFormElement]:
        """Find all input/textarea/select elements in document order."""
        handles = await self._page.query_selector_all(FORM_CONTROL_SELECTOR)
        return [PlaywrightFormElement(handle) for handle in handles]

    async def observe_mutations(self, callback: MutationCallback) -> IMutationSubscription:
        """Install a MutationObserver that reports batches to `callback`."""
        await self._ensure_binding()

        token = uuid.uuid4().hex
        self._mutation_callbacks[token] = callback
        await self._page.evaluate(OBSERVE_JS, [MUTATION_BINDING, token])
        return PlaywrightMutationSubscription(self, token)

    async def _ensure_binding(self) -> None:
        if self._binding_installed:
            return
        try:
            await self._page.expose_binding(MUTATION_BINDING, self._on_mutation)
        except Exception as e:
            # Already exposed on this page by an earlier wrapper
            logger.debug(f"expose_binding: {e}")
        self._binding_installed = True

    def _on_mutation(self, source: Any, token: str, count: int) -> None:
        callback = self._mutation_callbacks.get(token)
        if callback is not None:
            callback(int(count))

    async def close(self) -> None:
        """Close page."""
        await self._page.close()


class PlaywrightBrowser:
    """
    Launches a Playwright browser and opens form pages.

    Example:
        >>> browser = PlaywrightBrowser()
        >>> await browser.launch(headless=True)
        >>> page = await browser.new_page()
        >>> await page.goto("https://example.com/apply")
        >>> await browser.close()
    """

    def __init__(self):
        """Initialize the browser (not launched yet)."""
        self._playwright: Any = None
        self._browser: Any = None
        self._default_context: Any = None

    @property
    def is_connected(self) -> bool:
        """Check if browser is connected."""
        return self._browser is not None and self._browser.is_connected()

    async def launch(
        self,
        headless: bool = True,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        **options: Any,
    ) -> None:
        """
        Launch the browser.

        Args:
            headless: Whether to run headless
            browser_type: Type of browser to launch
            **options: Additional Playwright launch options (channel, slow_mo)
        """
        try:
            from playwright.async_api import async_playwright

            self._playwright = await async_playwright().start()

            browser_launchers = {
                BrowserType.CHROMIUM: self._playwright.chromium,
                BrowserType.FIREFOX: self._playwright.firefox,
                BrowserType.WEBKIT: self._playwright.webkit,
            }
            launcher = browser_launchers.get(browser_type, self._playwright.chromium)

            self._browser = await launcher.launch(headless=headless, **options)

            logger.info(f"Launched {browser_type.value} browser (headless={headless})")

        except Exception as e:
            await self.close()
            raise BrowserLaunchError(f"Failed to launch browser: {e}")

    async def new_page(self, **options: Any) -> PlaywrightFormPage:
        """
        Create a new page.

        Args:
            **options: Context options (viewport, etc.)

        Returns:
            New page instance
        """
        if not self._browser:
            raise BrowserConnectionError("Browser not launched. Call launch() first.")

        if not self._default_context:
            self._default_context = await self._browser.new_context(**options)

        page = await self._default_context.new_page()
        return PlaywrightFormPage(page)

    async def close(self) -> None:
        """Close the browser and cleanup."""
        if self._default_context:
            await self._default_context.close()
            self._default_context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Browser closed")
