"""Kinds of inputs and outputs, and the names older servers used for them."""

from __future__ import annotations

from enum import Enum


class IOType(Enum):
    """Kind of an IO, keyed by the server's ``gui_type`` name."""

    UNKNOWN = ""
    TIME = "time"
    TIME_RANGE = "time_range"
    SWITCH = "switch"
    SWITCH_LONG = "switch_long"
    SWITCH3 = "switch3"
    TEMP = "temp"
    ANALOG_IN = "analog_in"
    STRING_IN = "string_in"
    LIGHT = "light"
    LIGHT_DIMMER = "light_dimmer"
    LIGHT_RGB = "light_rgb"
    ANALOG_OUT = "analog_out"
    SHUTTER = "shutter"
    SHUTTER_SMART = "shutter_smart"
    STRING_OUT = "string_out"
    VAR_BOOL = "var_bool"
    VAR_INT = "var_int"
    VAR_STRING = "var_string"
    TIMER = "timer"
    SCENARIO = "scenario"
    AVRECEIVER = "avreceiver"
    AUDIO = "audio"
    AUDIO_OUTPUT = "audio_output"
    AUDIO_PLAYER = "audio_player"
    CAMERA = "camera"
    CAMERA_OUTPUT = "camera_output"
    FAV_ALL_LIGHTS = "fav_all_lights"
    PUMP = "pump"
    OUTLET = "outlet"
    BOILER = "boiler"
    HEATER = "heater"


def io_type_from_gui_type(gui_type: str) -> IOType:
    """Map a ``gui_type`` string to an :class:`IOType`; unknown gives UNKNOWN."""
    try:
        return IOType(gui_type)
    except ValueError:
        return IOType.UNKNOWN


_OLD_GUI_TYPES: dict[str, str] = {
    "InputTime": "time",
    "InPlageHoraire": "time_range",
    "TimeRange": "time_range",
    "GpioInputSwitch": "switch",
    "GpioInputSwitchLongPress": "switch_long",
    "GpioInputSwitchTriple": "switch3",
    "OWTemp": "temp",
    "WIAnalog": "analog_in",
    "WagoInputAnalog": "analog_in",
    "WIDigitalBP": "switch",
    "WIDigital": "switch",
    "WagoInputSwitch": "switch",
    "WIDigitalLong": "switch_long",
    "WagoInputSwitchLongPress": "switch_long",
    "WIDigitalTriple": "switch3",
    "WagoInputSwitchTriple": "switch3",
    "WITemp": "temp",
    "WagoInputTemp": "temp",
    "WebInputSwitch": "switch",
    "WebInputAnalog": "analog_in",
    "WebInputTemp": "temp",
    "WebInputString": "string_in",
    "ZibaseTemp": "temp",
    "ZibaseAnalogIn": "analog_in",
    "ZibaseDigitalIn": "switch",
    "MySensorsInputAnalog": "analog_in",
    "MySensorsInputString": "string_in",
    "MySensorsInputSwitch": "switch",
    "MySensorsInputSwitchLongPress": "switch_long",
    "MySensorsInputSwitchTriple": "switch3",
    "MySensorsInputTemp": "temp",
    "PingInputSwitch": "switch",
    "KNXInputSwitch": "switch",
    "KNXInputAnalog": "analog_in",
    "KNXInputSwitchLongPress": "switch_long",
    "KNXInputSwitchTriple": "switch3",
    "KNXInputTemp": "temp",
    "OutputFake": "light",
    "GpioOutputSwitch": "light",
    "GpioOutputShutter": "shutter",
    "GpioOutputShutterSmart": "shutter_smart",
    "WOAnalog": "analog_out",
    "WagoOutputAnalog": "analog_out",
    "WODali": "light_dimmer",
    "WagoOutputDimmer": "light_dimmer",
    "WODaliRVB": "light_rgb",
    "WagoOutputDimmerRGB": "light_rgb",
    "WODigital": "light",
    "WagoOutputLight": "light",
    "WOVolet": "shutter",
    "WagoOutputShutter": "shutter",
    "WOVoletSmart": "shutter_smart",
    "WagoOutputShutterSmart": "shutter_smart",
    "X10Output": "light",
    "WebOutputString": "string_out",
    "WebOutputLight": "light",
    "WebOutputLightRGB": "light_rgb",
    "ZibaseDigitalOut": "light",
    "MySensorsOutputAnalog": "analog_out",
    "MySensorsOutputDimmer": "light_dimmer",
    "MySensorsOutputLight": "light",
    "MySensorsOutputLightRGB": "light_rgb",
    "MySensorsOutputShutter": "shutter",
    "MySensorsOutputShutterSmart": "shutter_smart",
    "MySensorsOutputString": "string_out",
    "OLAOutputLightDimmer": "light_dimmer",
    "OLAOutputLightRGB": "light_rgb",
    "WOLOutputBool": "var_bool",
    "KNXOutputLight": "light",
    "KNXOutputAnalog": "analog_out",
    "KNXOutputLightDimmer": "light_dimmer",
    "KNXOutputLightRGB": "light_rgb",
    "KNXOutputShutter": "shutter",
    "KNXOutputShutterSmart": "shutter_smart",
    "HueOutputLightRGB": "light_rgb",
    "InputTimer": "timer",
    "Scenario": "scenario",
    "InternalInt": "var_int",
    "InternalBool": "var_bool",
    "InternalString": "var_string",
    "AVReceiver": "avreceiver",
    "slim": "audio",
    "Squeezebox": "audio",
    "Axis": "camera",
    "Gadspot": "camera",
    "Planet": "camera",
    "StandardMjpeg": "camera",
    "standard_mjpeg": "camera",
}


def detect_old_gui_type(type_name: str) -> str:
    """``gui_type`` for an IO class name sent by older servers, or ``""``."""
    return _OLD_GUI_TYPES.get(type_name, "")