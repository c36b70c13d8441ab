# calaos_home

Client-side models for a home automation server. The package covers rooms and
their inputs and outputs, the list of lights that are on, favourites, the event
log and weather forecasts. It also has the local configuration and a few helpers
for a desktop control panel.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `calaos_home.events`: `Signal` is a small observer list with `connect`,
  `disconnect` and `emit`. The models use it to report changes.
- `calaos_home.config`
  - `LocalConfig` keeps string options in `local_config.xml`. It has
    `get_option`, `set_option`, `all_options`, `load_auth` and `save_auth`.
  - `ServerDiscovery` builds the `CALAOS_DISCOVER` broadcast and reads the
    `CALAOS_IP` replies. `parse_discovery_reply` parses a single reply.
- `calaos_home.netinfo`: `NetworkInfo` describes a network interface.
  `set_ipv4_cidr` sets its address and netmask, and `to_json` returns its
  settings as a dict. `netmask_to_cidr` gives the prefix length of a netmask.
- `calaos_home.iotypes`
  - `IOType` lists the kinds of IO.
  - `io_type_from_gui_type` maps a `gui_type` name to an `IOType`.
  - `detect_old_gui_type` maps the IO class names that older servers send.
- `calaos_home.io`
  - `IOBase` is one input or output. It keeps the IO's state, and its `send_*`
    methods send commands.
  - `IOCache` indexes IOs by id.
  - `Connection` is the link that the models talk through.
- `calaos_home.rooms`: `RoomModel`, `ScenarioModel` and `LoadMode`.
- `calaos_home.home`: `HomeModel`, `RoomItem` and `LightOnModel`. They are built
  from the server's home description.
- `calaos_home.room_filter`: `RoomFilterModel` gives a sorted view of a room. It
  splits the IOs into left and right columns, or shows only the scenarios
  (`FilterType`).
- `calaos_home.favorites`
  - `FavoritesModel` holds an ordered list of favourite IOs. `save` and `load`
    write and read that list.
  - `HomeFavModel` lists every room with all its IOs. The first room it lists is
    a special room of shortcuts.
- `calaos_home.eventlog`: `EventLogModel` loads the event log one page at a time.
  `EventLogItem` holds a single event, ready for display.
- `calaos_home.weather`: `WeatherModel` fetches the current weather and a
  five-day forecast from the OpenWeatherMap API, using the `latitude` and
  `longitude` options. It needs an API key of your own (`app_id`). Each day is a
  `WeatherData`.
- `calaos_home.network_request`: `NetworkRequest` runs one HTTP request. The
  result comes back as decoded JSON, as raw bytes, or written to a file. Each
  result is emitted on a signal.
- `calaos_home.usb_disk`: `UsbDiskModel` turns a device listing into `UsbDisk`
  entries. `size_human` formats a byte count.
- `calaos_home.installer`
  - `OSInstaller` forwards an installer's output and its outcome to a dispatch
    callback.
  - `parse_log_line` cleans a line of output and extracts its terminal colour.
- `calaos_home.user_info`: `UserInfoModel` keeps user e-mail addresses in the
  `user_emails` option. `send_email` mails every address it holds by starting
  the external `calaos_mail` program.
- `calaos_home.screen`: `ScreenManager` turns the screen on and off and keeps
  the `dpms_enable` and `dpms_standby` options. A change is written to the
  configuration `write_delay` seconds (5 by default) after the last change.

## Example

```python
from calaos_home.config import LocalConfig
from calaos_home.io import Connection, IOCache
from calaos_home.home import HomeModel, LightOnModel
from calaos_home.rooms import ScenarioModel

config = LocalConfig(config_dir="/tmp/calaos-conf", cache_dir="/tmp/calaos-cache")
config.set_option("lang", "fr")
print(config.get_option("lang"))

password = "password"
config.save_auth("user@example.com", password)

connection = Connection()
connection.command_sent.connect(lambda *cmd: print("send", cmd))

home = HomeModel(connection, IOCache(), ScenarioModel(), LightOnModel())
home.load({"home": [{
    "name": "Kitchen", "type": "kitchen", "hits": "3",
    "items": {"inputs": [], "outputs": [
        {"id": "out_1", "name": "Ceiling", "gui_type": "light",
         "state": "true", "visible": "true"},
    ]},
}]})
print(home.lights_on_count)        # 1
home.get_room_model(0).get_item(0).send_false()
```

When no `local_config.xml` exists yet, `LocalConfig` writes one with default
options. The default user is `user` and the default password is `password`;
change them with `save_auth`.

## What the package does not do

- It has no user interface and no command to run. It only provides the models
  that a panel would display.
- It does not connect to the home server itself. `Connection` emits outgoing
  commands and JSON messages on `command_sent` and `json_sent`. Incoming
  changes must be fed in by emitting `event_input_change`,
  `event_output_change` and `log_event_loaded`.
- `ServerDiscovery` does not open a socket and does not run a timer. You pass a
  UDP socket to `send_discover`, and pass each datagram you receive to
  `handle_datagram`.
- `ScreenManager` does not drive a display. It calls the `update_dpms` and
  `wake_up_screen` methods of the display object it is given.
- `OSInstaller` does not run an installation. It only reports the output and
  the result that you pass to it.
- `UsbDiskModel` does not list the devices on the machine. You pass it a
  device listing.