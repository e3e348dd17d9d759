"""Example usage of ObjectDecorator.

This example decorates a small in-memory "browser" object graph: a driver
that produces elements and a navigation helper. It shows the three usual
kinds of decorators:

    - a logging decorator overriding before_call/after_call for every object,
    - a waiting decorator giving elements their own wrapper,
    - a decorator replacing one method (click) with a different behavior,

and how decorators stack.

Prerequisites:
    - decorkit library installed
"""

import time

from decorkit import DefaultDecorated, ObjectDecorator, decorates, get_logger

logger = get_logger(__name__)


class Element:
    """Element of a fake page."""

    def __init__(self, name: str, driver: "Driver") -> None:
        self.name = name
        self.driver = driver
        self.shown_at = time.monotonic() + 0.05

    def is_displayed(self) -> bool:
        return time.monotonic() >= self.shown_at

    def click(self) -> None:
        if not self.is_displayed():
            raise RuntimeError(f"{self.name} is not visible yet")
        self.driver.log.append(f"click:{self.name}")

    def __repr__(self) -> str:
        return f"Element({self.name!r})"


class Navigation:
    def __init__(self, driver: "Driver") -> None:
        self.driver = driver

    def to(self, url: str) -> None:
        self.driver.url = url


class Driver:
    """Fake driver producing elements and a navigation helper."""

    def __init__(self) -> None:
        self.url = "about:blank"
        self.log: list[str] = []

    def find_element(self, name: str) -> Element:
        return Element(name, self)

    def navigate(self) -> Navigation:
        return Navigation(self)

    def execute_script(self, script: str, *args) -> None:
        self.log.append(f"script:{script}:{args[0].name}")


class LoggingDecorator(ObjectDecorator):
    """Log every call on the driver and every object derived from it."""

    def __init__(self) -> None:
        super().__init__(capability_types=(Element, Navigation))

    def before_call(self, target, method, args, kwargs):
        logger.info("before_call", target=repr(target), method=str(method), args=args)

    def after_call(self, target, method, args, kwargs, result):
        logger.info("after_call", target=repr(target), method=str(method), result=repr(result))


class ImplicitlyWaitingDecorator(ObjectDecorator):
    """Wait for an element to be displayed before clicking it."""

    def __init__(self, timeout: float = 1.0) -> None:
        super().__init__()
        self.timeout = timeout

    @decorates(Element)
    def create_element_decorated(self, original: Element):
        decorator = self

        class WaitingElement(DefaultDecorated):
            def before_call(self, method, args, kwargs):
                if method.name == "click":
                    deadline = time.monotonic() + decorator.timeout
                    while not self.get_original().is_displayed():
                        if time.monotonic() > deadline:
                            raise TimeoutError(f"{original!r} never became visible")
                        time.sleep(0.01)

        return WaitingElement(original, self)


class JavaScriptClickDecorator(ObjectDecorator):
    """Click elements through a script instead of the regular click."""

    @decorates(Element)
    def create_element_decorated(self, original: Element):
        class ScriptClickElement(DefaultDecorated):
            def call(self, method, args, kwargs):
                if method.name == "click":
                    root = self.decorator.get_decorated_driver().get_original()
                    root.execute_script("arguments[0].click()", self.get_original())
                    return None
                return super().call(method, args, kwargs)

        return ScriptClickElement(original, self)


def main():
    """Demonstrate decorators on the fake driver."""
    # Example 1: logging on the whole graph
    driver = LoggingDecorator().decorate(Driver())
    driver.navigate().to("http://example.com/")
    print(f"URL after navigation: {driver.url}")

    # Example 2: implicit waits for elements only
    driver = ImplicitlyWaitingDecorator().decorate(Driver())
    driver.find_element("submit").click()
    print(f"Driver log: {driver.log}")

    # Example 3: replacing click
    driver = JavaScriptClickDecorator().decorate(Driver())
    driver.find_element("hidden").click()
    print(f"Driver log: {driver.log}")

    # Example 4: stacking, waiting first and logging inside
    driver = ImplicitlyWaitingDecorator().decorate(LoggingDecorator().decorate(Driver()))
    driver.find_element("late").click()
    print(f"Driver log: {driver.log}")


if __name__ == "__main__":
    main()
