"""Tests for the ObjectDecorator hook chain."""

import pytest

from decorkit import (
    UNHANDLED,
    DecorkitException,
    Handled,
    InvalidArgumentError,
    ObjectDecorator,
)


class Rectangle:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.area_calls = 0
        self.history: list[tuple[int, int]] = []

    def area(self) -> int:
        self.area_calls += 1
        return self.width * self.height

    def resize(self, width: int | None = None, height: int | None = None) -> tuple[int, int]:
        if width is not None:
            self.width = width
        if height is not None:
            self.height = height
        self.history.append((self.width, self.height))
        return self.width, self.height

    def get_history(self) -> list[tuple[int, int]]:
        return self.history

    def snapshot(self) -> tuple[list[tuple[int, int]], int]:
        return self.history, self.area_calls

    def export_history(self, out: list) -> None:
        out.extend(self.history)


class Boom(Exception):
    """Raised by Risky."""


class Risky:
    def __init__(self) -> None:
        self.error = Boom("kaboom")

    def risky(self) -> None:
        raise self.error


class TracingDecorator(ObjectDecorator):
    """Records the order of before/after hooks."""

    def __init__(self, trace: list) -> None:
        super().__init__()
        self.trace = trace

    def before_call(self, target, method, args, kwargs):
        self.trace.append(f"before:{method.name}")

    def after_call(self, target, method, args, kwargs, result):
        self.trace.append(f"after:{method.name}:{result}")


class TestDecorate:
    """Test the decorate entry point."""

    def test_decorate_none_is_rejected(self):
        """decorate(None) fails with an invalid argument error."""
        decorator = ObjectDecorator()

        with pytest.raises(InvalidArgumentError) as exc_info:
            decorator.decorate(None)

        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, DecorkitException)
        assert exc_info.value.error_code == "INVALID_ARGUMENT"
        assert decorator.get_decorated_driver() is None

    def test_decorated_driver_is_none_before_decorate(self):
        assert ObjectDecorator().get_decorated_driver() is None

    def test_decorated_driver_wraps_last_original(self):
        """get_decorated_driver exposes the most recently decorated object."""
        decorator = ObjectDecorator()
        first = Rectangle(1, 2)
        second = Rectangle(3, 4)

        decorator.decorate(first)
        assert decorator.get_decorated_driver().get_original() is first

        decorator.decorate(second)
        assert decorator.get_decorated_driver().get_original() is second

    def test_root_wrapper_is_owned_by_decorator(self):
        decorator = ObjectDecorator()
        decorator.decorate(Rectangle(1, 1))

        assert decorator.get_decorated_driver().decorator is decorator

    def test_target_type_argument_is_deprecated(self):
        with pytest.warns(DeprecationWarning):
            ObjectDecorator(target_type=Rectangle)


class TestDefaultBehavior:
    """Test that an empty policy does not change behavior."""

    def test_results_match_original(self):
        original = Rectangle(3, 4)
        decorated = ObjectDecorator().decorate(original)

        assert decorated.area() == 12
        assert decorated.resize(width=5) == (5, 4)
        assert decorated.resize(6, height=7) == (6, 7)
        assert decorated.get_history() is original.history
        assert original.width == 6
        assert original.height == 7

    def test_results_are_the_original_objects(self):
        original = Rectangle(3, 4)
        decorated = ObjectDecorator().decorate(original)
        decorated.resize(width=5)

        history = decorated.get_history()
        history.append((0, 0))

        assert history is original.history
        assert decorated.snapshot()[0] is original.history
        assert original.history == [(5, 4), (0, 0)]

    def test_container_arguments_are_passed_through(self):
        original = Rectangle(3, 4)
        decorated = ObjectDecorator().decorate(original)
        decorated.resize(height=2)
        out = []

        decorated.export_history(out)

        assert out == [(3, 2)]

    def test_original_invoked_once_per_call(self):
        original = Rectangle(3, 4)
        decorated = ObjectDecorator().decorate(original)

        decorated.area()
        decorated.area()

        assert original.area_calls == 2

    def test_error_propagates_unwrapped(self):
        """Without on_error the original exception reaches the caller."""
        original = Risky()
        decorated = ObjectDecorator().decorate(original)

        with pytest.raises(Boom) as exc_info:
            decorated.risky()

        assert exc_info.value is original.error

    def test_default_hooks_return_unhandled(self):
        decorator = ObjectDecorator()
        decorator.decorate(Rectangle(1, 1))
        target = decorator.get_decorated_driver()

        assert decorator.before_call(target, None, (), {}) is UNHANDLED
        assert decorator.call(target, None, (), {}) is UNHANDLED
        assert decorator.after_call(target, None, (), {}, 1) is UNHANDLED
        assert decorator.on_error(target, None, (), {}, Boom()) is UNHANDLED


class TestHookChain:
    """Test the order and semantics of the hooks."""

    def test_before_and_after_trace(self, trace):
        """Tracing hooks see area() in order with its result."""
        decorated = TracingDecorator(trace).decorate(Rectangle(3, 4))

        assert decorated.area() == 12
        assert trace == ["before:area", "after:area:12"]

    def test_call_replaces_invocation(self):
        """A result from call is returned and the original is not invoked."""

        class FixedArea(ObjectDecorator):
            def call(self, target, method, args, kwargs):
                if method.name == "area":
                    return 99
                return UNHANDLED

        original = Rectangle(3, 4)
        decorated = FixedArea().decorate(original)

        assert decorated.area() == 99
        assert original.area_calls == 0
        assert decorated.resize(width=1) == (1, 4)

    def test_handled_outcome_is_unwrapped(self):
        """Handled(None) replaces the call with None."""

        class NoArea(ObjectDecorator):
            def call(self, target, method, args, kwargs):
                return Handled(None)

        original = Rectangle(3, 4)

        assert NoArea().decorate(original).area() is None
        assert original.area_calls == 0

    def test_after_call_sees_call_result(self):
        seen = []

        class FixedArea(ObjectDecorator):
            def call(self, target, method, args, kwargs):
                return 7

            def after_call(self, target, method, args, kwargs, result):
                seen.append(result)

        FixedArea().decorate(Rectangle(3, 4)).area()

        assert seen == [7]

    def test_after_call_sees_original_result(self):
        seen = []

        class Recording(ObjectDecorator):
            def after_call(self, target, method, args, kwargs, result):
                seen.append((method.name, args, kwargs, result))

        Recording().decorate(Rectangle(3, 4)).resize(2, height=5)

        assert seen == [("resize", (2,), {"height": 5}, (2, 5))]

    def test_on_error_supplies_result(self):
        after = []

        class Forgiving(ObjectDecorator):
            def on_error(self, target, method, args, kwargs, error):
                return f"recovered from {error}"

            def after_call(self, target, method, args, kwargs, result):
                after.append(result)

        decorated = Forgiving().decorate(Risky())

        assert decorated.risky() == "recovered from kaboom"
        assert after == []

    def test_on_error_may_raise(self):
        class Translating(ObjectDecorator):
            def on_error(self, target, method, args, kwargs, error):
                raise RuntimeError("translated") from error

        decorated = Translating().decorate(Risky())

        with pytest.raises(RuntimeError, match="translated") as exc_info:
            decorated.risky()

        assert isinstance(exc_info.value.__cause__, Boom)

    def test_on_error_receives_original_error(self):
        received = []

        class Inspecting(ObjectDecorator):
            def on_error(self, target, method, args, kwargs, error):
                received.append(error)
                return UNHANDLED

        original = Risky()

        with pytest.raises(Boom):
            Inspecting().decorate(original).risky()

        assert received == [original.error]

    def test_before_call_error_aborts_chain(self):
        class Refusing(ObjectDecorator):
            def before_call(self, target, method, args, kwargs):
                raise PermissionError(method.name)

        original = Rectangle(3, 4)

        with pytest.raises(PermissionError, match="area"):
            Refusing().decorate(original).area()

        assert original.area_calls == 0

    def test_call_error_is_not_routed_to_on_error(self):
        handled = []

        class Broken(ObjectDecorator):
            def call(self, target, method, args, kwargs):
                raise KeyError("from call")

            def on_error(self, target, method, args, kwargs, error):
                handled.append(error)
                return None

        with pytest.raises(KeyError):
            Broken().decorate(Rectangle(1, 1)).area()

        assert handled == []

    def test_after_call_error_propagates(self):
        handled = []

        class StrictAfter(ObjectDecorator):
            def after_call(self, target, method, args, kwargs, result):
                raise AssertionError(f"unexpected {result}")

            def on_error(self, target, method, args, kwargs, error):
                handled.append(error)
                return None

        original = Rectangle(3, 4)

        with pytest.raises(AssertionError, match="unexpected 12"):
            StrictAfter().decorate(original).area()

        assert original.area_calls == 1
        assert handled == []

    def test_target_is_the_root_wrapper(self):
        targets = []

        class Recording(ObjectDecorator):
            def before_call(self, target, method, args, kwargs):
                targets.append(target)

        decorator = Recording()
        decorator.decorate(Rectangle(1, 1)).area()

        assert targets == [decorator.get_decorated_driver()]

    def test_method_describes_member(self):
        methods = []

        class Recording(ObjectDecorator):
            def before_call(self, target, method, args, kwargs):
                methods.append(method)

        Recording().decorate(Rectangle(1, 1)).area()

        assert methods[0].name == "area"
        assert methods[0].owner is Rectangle
        assert str(methods[0]) == "Rectangle.area"
