import shlex
from typing import Dict, List

import pytest

from droidcommand.core.errors import ADBError
from droidcommand.providers import adb
from droidcommand.providers.adb import AdbProviderSource, AdbTreeProvider

WINDOW = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?><hierarchy rotation="0">
<node text="" class="android.widget.FrameLayout" content-desc="" clickable="false" bounds="[0,0][1080,2340]">
  <node text="hello" class="android.widget.EditText" content-desc="Type a message" clickable="true" bounds="[0,2100][900,2200]" />
  <node text="" class="android.widget.ImageButton" content-desc="Send" clickable="true" bounds="[920,2100][1060,2200]" />
</node>
</hierarchy>"""


class FakeDevice:
    serial = "emulator-5554"

    def __init__(self, responses: Dict[str, str]):
        self.responses = responses
        self.commands: List[str] = []

    def shell(self, command: str) -> str:
        self.commands.append(command)
        for prefix, output in self.responses.items():
            if command.startswith(prefix):
                return output
        return ""


def provider_for(**responses) -> tuple[AdbTreeProvider, FakeDevice]:
    device = FakeDevice({
        "uiautomator dump": "UI hierchary dumped to: /sdcard/window_dump.xml",
        "cat ": WINDOW,
        "wm size": "Physical size: 1080x2340\n",
        **responses,
    })
    return AdbTreeProvider(device), device


def test_find_and_click_taps_node_center():
    provider, device = provider_for()
    node = provider.find_by_text("send")
    assert node.content_desc == "Send"
    assert provider.click(node)
    assert device.commands[-1] == "input tap 990 2150"


def test_set_text_clears_then_types_escaped():
    provider, device = provider_for()
    field = provider.find_editable("message")
    assert provider.set_text(field, "on my way & co")
    assert device.commands.count(f"input keyevent {adb.KEYCODE_DEL}") == len("hello")
    assert device.commands[-1] == "input text 'on%smy%sway%s&%sco'"


@pytest.mark.parametrize("text", ["it's $HOME", 'say "hi" `id`', "costs $(reboot) $5"])
def test_set_text_reaches_device_shell_literally(text):
    provider, device = provider_for()
    provider.set_text(provider.find_editable("message"), text)
    assert shlex.split(device.commands[-1]) == ["input", "text", text.replace(" ", "%s")]


def test_launch_app_checks_installation():
    provider, device = provider_for(**{"pm list packages": "package:com.whatsapp\npackage:com.whatsapp.w4b\n"})
    assert provider.launch_app("com.whatsapp")
    assert device.commands[-1].startswith("monkey -p com.whatsapp")

    assert not provider.launch_app("com.spotify.music")
    assert not device.commands[-1].startswith("monkey -p com.spotify.music")


def test_back_and_scroll():
    provider, device = provider_for()
    assert provider.press_back()
    assert device.commands[-1] == "input keyevent 4"
    assert provider.scroll_forward()
    assert device.commands[-1] == "input swipe 540 1638 540 702 300"
    assert provider.scroll_backward()
    assert device.commands[-1] == "input swipe 540 702 540 1638 300"


def test_screen_size_prefers_override():
    provider, _ = provider_for(**{"wm size": "Physical size: 1080x2340\nOverride size: 720x1560\n"})
    assert provider.screen_size() == (720, 1560)


def test_bad_dump_raises_adb_error():
    provider, _ = provider_for(**{"cat ": "ERROR: null root node returned by UiTestAutomationBridge."})
    with pytest.raises(ADBError, match="hierarchy"):
        provider.find_by_text("Send")


def test_provider_source_reports_absence(monkeypatch):
    def no_device(serial=None, adb_path=None):
        raise ADBError("No Android device detected.")

    monkeypatch.setattr(adb.Device, "connect", staticmethod(no_device))
    assert AdbProviderSource()() is None


def test_provider_source_caches_connection(monkeypatch):
    connects = []

    def fake_connect(serial=None, adb_path=None):
        connects.append(serial)
        return FakeDevice({})

    monkeypatch.setattr(adb.Device, "connect", staticmethod(fake_connect))
    source = AdbProviderSource("emulator-5554")
    assert source() is source()
    assert connects == ["emulator-5554"]
