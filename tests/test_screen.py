import time

from calaos_home.screen import ScreenManager


class _Config:
    def __init__(self, values=None):
        self.values = dict(values or {})

    def get_option(self, key):
        return self.values.get(key, "")

    def set_option(self, key, value):
        self.values[key] = value


class _Display:
    def __init__(self):
        self.calls = []

    def update_dpms(self, enable, seconds):
        self.calls.append(("update_dpms", enable, seconds))

    def wake_up_screen(self, enable):
        self.calls.append(("wake", enable))


def test_init_disables_dpms_and_reads_config():
    display = _Display()
    mgr = ScreenManager(_Config({"dpms_enable": "true", "dpms_standby": "5"}), display)
    assert display.calls == [("update_dpms", False, 0)]
    assert mgr.dpms_enabled is True
    assert mgr.dpms_time == 5 * 60 * 1000


def test_init_defaults_to_one_minute():
    mgr = ScreenManager(_Config(), _Display())
    assert mgr.dpms_enabled is False
    assert mgr.dpms_time == 60 * 1000


def test_suspend_screen():
    display = _Display()
    mgr = ScreenManager(_Config(), display)
    display.calls.clear()
    mgr.suspend_screen()
    assert display.calls == [("update_dpms", True, 0), ("wake", False)]


def test_wakeup_screen_ends_on():
    display = _Display()
    mgr = ScreenManager(_Config(), display)
    display.calls.clear()
    mgr.wakeup_screen()
    assert display.calls[-2:] == [("wake", True), ("update_dpms", False, 0)]


def test_update_dpms_time_minimum():
    mgr = ScreenManager(_Config(), _Display())
    mgr.write_delay = 60.0
    mgr.update_dpms_time(0)
    assert mgr.dpms_time == 60 * 1000
    mgr.update_dpms_time(-4)
    assert mgr.dpms_time == 60 * 1000


def test_write_config_round_trip():
    cfg = _Config()
    mgr = ScreenManager(cfg, _Display())
    mgr.write_delay = 60.0
    mgr.update_dpms_enabled(True)
    mgr.update_dpms_time(3)
    mgr.write_config()
    assert cfg.values["dpms_enable"] == "true"
    assert cfg.values["dpms_standby"] == "3"
    again = ScreenManager(cfg, _Display())
    assert again.dpms_enabled is True
    assert again.dpms_time == mgr.dpms_time


def test_scheduled_write_happens():
    cfg = _Config()
    mgr = ScreenManager(cfg, _Display())
    mgr.write_delay = 0.0
    mgr.update_dpms_enabled(False)
    deadline = time.monotonic() + 2.0
    while "dpms_enable" not in cfg.values and time.monotonic() < deadline:
        time.sleep(0.01)
    assert cfg.values.get("dpms_enable") == "false"
    assert cfg.values.get("dpms_standby") == "1"