"""Device introspection helpers.

:class:`Device` answers screen-metric and device-kind questions and manages
accelerometer subscriptions on top of a :class:`PlatformBackend`.
:class:`StaticPlatform` is an in-memory platform with fixed capabilities,
used when no device is attached.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from styled_markup.shared import get_logger

Listener = Callable[..., Any]

DPI_PER_DENSITY = 160  # Baseline density of a 1x screen
ACCELEROMETER_EVENT = "update"


class PlatformBackend(ABC):
    """Capabilities and event sources of the running device."""

    #: Operating system family, "ios" or "android"
    os: str = "ios"
    #: Device-kind name, e.g. "iphone", "ipad", "android"
    osname: str = "iphone"
    #: Model name reported by the device
    model: str = ""
    dpi: float = DPI_PER_DENSITY
    logical_density_factor: float = 1.0
    platform_width: float = 0
    platform_height: float = 0

    @abstractmethod
    def add_accelerometer_listener(self, listener: Listener) -> None:
        """Subscribe to accelerometer updates."""

    @abstractmethod
    def remove_accelerometer_listener(self, listener: Listener) -> None:
        """Unsubscribe from accelerometer updates."""

    @abstractmethod
    def add_activity_listener(self, event: str, listener: Listener) -> None:
        """Subscribe to a lifecycle event ("pause", "resume") of the activity."""

    @abstractmethod
    def remove_activity_listener(self, event: str, listener: Listener) -> None:
        """Unsubscribe from a lifecycle event of the activity."""


@dataclass
class StaticPlatform(PlatformBackend):
    """Platform with fixed capabilities and in-memory event dispatch."""

    os: str = "ios"
    osname: str = "iphone"
    model: str = ""
    dpi: float = DPI_PER_DENSITY
    logical_density_factor: float = 1.0
    platform_width: float = 320
    platform_height: float = 480
    accelerometer_listeners: List[Listener] = field(default_factory=list)
    activity_listeners: Dict[str, List[Listener]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate platform values."""
        if self.os not in ("ios", "android"):
            raise ValueError("os must be 'ios' or 'android'")
        if self.dpi <= 0:
            raise ValueError("dpi must be > 0")
        if self.logical_density_factor <= 0:
            raise ValueError("logical_density_factor must be > 0")

    def add_accelerometer_listener(self, listener: Listener) -> None:
        if listener not in self.accelerometer_listeners:
            self.accelerometer_listeners.append(listener)

    def remove_accelerometer_listener(self, listener: Listener) -> None:
        if listener in self.accelerometer_listeners:
            self.accelerometer_listeners.remove(listener)

    def add_activity_listener(self, event: str, listener: Listener) -> None:
        self.activity_listeners.setdefault(event, []).append(listener)

    def remove_activity_listener(self, event: str, listener: Listener) -> None:
        listeners = self.activity_listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def fire_accelerometer(self, event: Dict[str, Any]) -> None:
        """Deliver an accelerometer update to every subscriber."""
        for listener in list(self.accelerometer_listeners):
            listener(dict(event))

    def fire_activity_event(self, event: str) -> None:
        """Deliver an activity lifecycle event."""
        for listener in list(self.activity_listeners.get(event, [])):
            listener()


class Device:
    """Query the current device.

    Examples:
        >>> device = Device(StaticPlatform(os="android", platform_width=720,
        ...                                logical_density_factor=2.0))
        >>> device.get_screen_width()
        360.0
    """

    def __init__(self, platform: PlatformBackend) -> None:
        self.platform = platform
        self.logger = get_logger(__name__, component="device")
        # Android lifecycle listeners installed per tilt callback
        self._lifecycle: Dict[Listener, Tuple[Listener, Listener]] = {}

    @property
    def is_android(self) -> bool:
        return self.platform.os == "android"

    def on_tilt(self, callback: Listener) -> None:
        """Subscribe to accelerometer updates.

        Accelerometers are not emulated: on a simulator a warning is logged and
        nothing is subscribed. On Android the subscription is suspended while
        the activity is paused, to preserve battery life.
        """
        if self.is_simulator():
            self.logger.warning(
                "Accelerometer doesn't work on virtual devices",
                extra={"model": self.platform.model}
            )
            return

        self.platform.add_accelerometer_listener(callback)

        if self.is_android and callback not in self._lifecycle:
            def pause() -> None:
                self.platform.remove_accelerometer_listener(callback)

            def resume() -> None:
                self.platform.add_accelerometer_listener(callback)

            self.platform.add_activity_listener("pause", pause)
            self.platform.add_activity_listener("resume", resume)
            self._lifecycle[callback] = (pause, resume)

    def off_tilt(self, callback: Listener) -> None:
        """Unsubscribe a callback installed with :meth:`on_tilt`."""
        self.platform.remove_accelerometer_listener(callback)
        hooks = self._lifecycle.pop(callback, None)
        if hooks is not None:
            pause, resume = hooks
            self.platform.remove_activity_listener("pause", pause)
            self.platform.remove_activity_listener("resume", resume)

    def get_screen_density(self) -> float:
        """Screen density, 1.0 for a baseline 160 dpi screen."""
        if self.is_android:
            return self.platform.logical_density_factor
        return self.platform.dpi / DPI_PER_DENSITY

    def get_screen_width(self) -> float:
        """Screen width in density-independent units."""
        if not self.is_android:
            return self.platform.platform_width
        return self.platform.platform_width / self.platform.logical_density_factor

    def get_screen_height(self) -> float:
        """Screen height in density-independent units."""
        if not self.is_android:
            return self.platform.platform_height
        return self.platform.platform_height / self.platform.logical_density_factor

    def is_simulator(self) -> bool:
        model = self.platform.model or ""
        return model == "Simulator" or "sdk" in model

    def is_ipad(self) -> bool:
        return self.platform.osname == "ipad"
