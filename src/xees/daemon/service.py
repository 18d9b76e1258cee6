"""D-Bus interface exposing the daemon controller."""

from dbus_next import Message, MessageType, Variant
from dbus_next.service import ServiceInterface, method

from .control import Controller

BUS_NAME = "net.andresovi.xees"
OBJECT_PATH = "/"
INTERFACE_NAME = "net.andresovi.xees"


class XeesInterface(ServiceInterface):
    """net.andresovi.xees interface, one method per control operation."""

    def __init__(self, controller: Controller) -> None:
        super().__init__(INTERFACE_NAME)
        self.controller = controller

    @method()
    def Enable(self) -> "s":
        return self.controller.enable()

    @method()
    def Disable(self, duration: "v") -> "s":
        # Any variant is accepted; non-integer payloads mean "indefinitely"
        value = duration.value if isinstance(duration, Variant) else duration
        return self.controller.disable(value)

    @method()
    def Status(self) -> "s":
        return self.controller.status()

    @method()
    def Quit(self) -> "s":
        return self.controller.quit()

    def handle_disable_message(self, msg: Message) -> Message | None:
        """Answer Disable calls whose signature is not "v".

        Installed with MessageBus.add_message_handler so that plain
        integers ("t", "x"), strings, or no argument at all reach the
        controller instead of an UnknownMethod error. Calls with a
        variant are left to the exported method.
        """
        if (
            msg.message_type != MessageType.METHOD_CALL
            or msg.member != "Disable"
            or msg.path != OBJECT_PATH
            or msg.interface not in (None, INTERFACE_NAME)
            or msg.signature == "v"
        ):
            return None

        # A single argument of any type is a duration candidate
        value = msg.body[0] if len(msg.body) == 1 else None
        return Message.new_method_return(msg, "s", [self.controller.disable(value)])
