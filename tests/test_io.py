import pytest

from calaos_home.io import Connection, Direction, IOBase, IOCache
from calaos_home.iotypes import IOType


@pytest.fixture
def conn():
    return Connection(http_api_v2=True)


@pytest.fixture
def sent(conn):
    calls = []
    conn.command_sent.connect(lambda *a: calls.append(a))
    return calls


def make_io(conn, direction=Direction.OUTPUT, **fields):
    data = {"id": "io1", "name": "Lamp", "gui_type": "light", "state": "false", "visible": "true"}
    data.update(fields)
    io = IOBase(conn, direction)
    io.load(data)
    return io


def test_load_sets_fields(conn):
    io = make_io(conn, hits="7", unit="W", rw="true", value_warning="true", io_style="pump")
    assert io.io_type is IOType.LIGHT
    assert io.name == "Lamp"
    assert io.io_id == "io1"
    assert io.hits == 7
    assert io.unit == "W"
    assert io.rw is True
    assert io.has_warning is True
    assert io.style == "pump"


def test_analog_out_forced_writable(conn):
    io = make_io(conn, gui_type="analog_out", rw="false")
    assert io.rw is True


def test_send_commands(conn, sent):
    io = make_io(conn)
    io.send_true()
    io.send_stop()
    assert sent == [("io1", "true", "output", "set_state"), ("io1", "stop", "output", "set_state")]


def test_input_direction_kind(conn, sent):
    io = make_io(conn, Direction.INPUT, gui_type="switch")
    io.send_false()
    assert sent == [("io1", "false", "input", "set_state")]


def test_send_int_and_string(conn, sent):
    io = make_io(conn)
    io.send_int_value(25)
    io.send_string_value("hello")
    assert sent[0][1] == "set 25"
    assert sent[1][1] == "hello"


def test_rgb_state_v2(conn):
    io = make_io(conn, gui_type="light_rgb", state=str(0x123456))
    assert (io.state_red(), io.state_green(), io.state_blue()) == (0x12, 0x34, 0x56)
    assert io.rgb_color == (0x12, 0x34, 0x56)


def test_rgb_state_legacy():
    conn = Connection(http_api_v2=False)
    io = make_io(conn, gui_type="light_rgb", state="#102030")
    assert io.rgb_color == (0x10, 0x20, 0x30)


def test_send_color_v2(conn, sent):
    io = make_io(conn, gui_type="light_rgb", state="0")
    io.send_color(0x12, 0x34, 0x56)
    assert sent == [("io1", f"set {0x123456}", "output", "set_state")]


def test_send_color_legacy():
    conn = Connection(http_api_v2=False)
    calls = []
    conn.command_sent.connect(lambda *a: calls.append(a))
    io = make_io(conn, gui_type="light_rgb", state="#000000")
    io.send_color(0x10, 0x20, 0x30)
    assert calls == [("io1", "set #102030", "", "set_state")]


def test_shutter_position_closing(conn):
    io = make_io(conn, gui_type="shutter_smart", state="down 30")
    assert io.shutter_position() == 30
    assert io.state_shutter_txt == "State: 30% Opened."
    assert io.state_shutter_txt_action == "Action: Closing..."
    assert io.state_shutter_bool is True


def test_shutter_position_closed(conn):
    io = make_io(conn, gui_type="shutter_smart", state="stop 100")
    assert io.shutter_position() == 100
    assert io.state_shutter_txt == "State: Closed."
    assert io.state_shutter_txt_action == "Action: stopped."
    assert io.state_shutter_bool is False


def test_shutter_position_empty_state(conn):
    io = make_io(conn, gui_type="shutter_smart", state="")
    assert io.shutter_position() == 0
    assert io.state_shutter_txt == "State: Opened."


def test_output_changed_light_signals(conn):
    io = make_io(conn)
    events = []
    io.light_on.connect(lambda i: events.append(("on", i)))
    io.light_off.connect(lambda i: events.append(("off", i)))
    conn.event_output_change.emit("io1", "state", "true")
    assert io.state_bool() is True
    conn.event_output_change.emit("io1", "state", "true")
    conn.event_output_change.emit("io1", "state", "false")
    assert events == [("on", io), ("off", io)]


def test_output_changed_other_id_ignored(conn):
    io = make_io(conn)
    conn.event_output_change.emit("other", "state", "true")
    assert io.state_bool() is False


def test_output_changed_name(conn):
    io = make_io(conn)
    io.output_changed("io1", "name", "Ceiling")
    assert io.name == "Ceiling"


def test_dimmer_state_change(conn):
    io = make_io(conn, gui_type="light_dimmer", state="0")
    events = []
    io.light_on.connect(lambda i: events.append("on"))
    io.output_changed("io1", "state", "40")
    assert io.state_int() == 40.0
    assert events == ["on"]


def test_input_changed(conn):
    io = make_io(conn, Direction.INPUT, gui_type="temp", state="20")
    changes = []
    io.state_changed.connect(lambda: changes.append(io.state_int()))
    conn.event_input_change.emit("io1", "state", "21.5")
    conn.event_input_change.emit("io1", "value_warning", "true")
    assert changes == [21.5]
    assert io.has_warning is True


def test_check_first_state(conn):
    on = make_io(conn, state="true")
    off = make_io(conn, state="false")
    events = []
    on.light_on.connect(events.append)
    off.light_on.connect(events.append)
    on.check_first_state()
    off.check_first_state()
    assert events == [on]


def test_clone_is_independent(conn):
    io = make_io(conn, gui_type="shutter_smart", state="up 60")
    io.room_name = "Kitchen"
    io.shutter_position()
    copy = io.clone()
    assert copy is not io
    assert copy.room_name == "Kitchen"
    assert copy.state_shutter_txt == io.state_shutter_txt
    assert copy.io_id == io.io_id
    copy.data["state"] = "stop 0"
    assert io.state_string() == "up 60"


def test_io_cache():
    conn = Connection()
    cache = IOCache()
    inp = make_io(conn, Direction.INPUT, gui_type="switch")
    out = make_io(conn)
    cache.add_input(inp)
    cache.add_output(out)
    cache.add_input(None)
    assert cache.search_input("io1") is inp
    assert cache.search_output("io1") is out
    assert cache.search_input("missing") is None
    cache.del_input(inp)
    assert cache.search_input("io1") is None
    cache.clear()
    assert cache.search_output("io1") is None


def test_json_sent(conn):
    got = []
    conn.json_sent.connect(lambda m, d: got.append((m, d)))
    conn.send_json("eventlog", {"page": 0})
    assert got == [("eventlog", {"page": 0})]