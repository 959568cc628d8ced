"""Built-in interop scenarios and loading of custom scenario files."""

import json
from collections.abc import Mapping, Sequence
from pathlib import Path

from webrtc_interop.models.scenario import MetricLine, Scenario, SkipRule

DEFAULT_SCENARIO = "browser"

ICE_ISSUE = SkipRule(reason="Skipped - ICE issue")


def _start(server: str) -> str:
    return f"dart run interop/automated/{server}.dart"


def _metrics(*lines: tuple[str, str]) -> Sequence[MetricLine]:
    return tuple(
        MetricLine(label=label, template=template) for label, template in lines
    )


SCENARIOS: Sequence[Scenario] = (
    Scenario(
        name="browser",
        title="WebRTC Browser Interop",
        server_url="http://localhost:8765",
        start_command=_start("dart_signaling_server"),
        timeout=30,
        metrics=_metrics(
            ("Messages", "{messagesSent}/{messagesReceived}"),
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="datachannel_answer",
        title="DataChannel Answer",
        server_url="http://localhost:8775",
        start_command=_start("datachannel_answer_server"),
        settle_between=True,
        metrics=_metrics(
            ("Sent", "{messagesSent}, Received: {messagesReceived}"),
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="dtmf",
        title="DTMF",
        server_url="http://localhost:8776",
        start_command=_start("dtmf_server"),
        settle_between=True,
        metrics=_metrics(
            ("Tones", '"{sentTones}"'),
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="ice_restart",
        title="ICE Restart",
        server_url="http://localhost:8782",
        start_command=_start("ice_restart_server"),
        timeout=45,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("ICE Credentials Changed", "{iceCredentialsChanged}"),
            ("Restart Success", "{restartSuccess}"),
            ("Messages", "{messagesSent}/{messagesReceived}"),
        ),
    ),
    Scenario(
        name="ice_trickle",
        title="ICE Trickle",
        server_url="http://localhost:8781",
        start_command=_start("ice_trickle_server"),
        timeout=30,
        metrics=_metrics(
            ("Trickle", "{iceTrickle}"),
            ("Candidates Recv", "{candidatesReceived}"),
            ("Candidates Sent", "{candidatesSent}"),
            ("Ping/Pong", "{pingPongSuccess}"),
        ),
    ),
    Scenario(
        name="ice_turn_trickle",
        title="ICE TURN Trickle",
        server_url="http://localhost:8783",
        start_command=_start("ice_turn_trickle_server"),
        metrics=_metrics(
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="interop_server",
        title="Interop Server",
        server_url="http://localhost:8794",
        start_command="dart run example/interop/server.dart --port 8794",
        timeout=30,
        settle_between=True,
        skips={
            "firefox": SkipRule(reason="Skipped - ICE issue"),
            "safari": SkipRule(reason="Skipped - needs trickle ICE"),
        },
    ),
    Scenario(
        name="media_answer",
        title="Media Answer",
        server_url="http://localhost:8776",
        start_command=_start("media_answer_server"),
        timeout=45,
        settle_between=True,
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="media_recvonly",
        title="Media Recvonly",
        server_url="http://localhost:8767",
        start_command=_start("media_recvonly_server"),
        timeout=45,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(("Packets", "{packetsReceived}")),
    ),
    Scenario(
        name="media_sendonly",
        title="Media Sendonly",
        server_url="http://localhost:8766",
        start_command=_start("media_sendonly_server"),
        timeout=45,
        metrics=_metrics(("Frames", "{framesReceived}")),
    ),
    Scenario(
        name="media_sendrecv",
        title="Media Sendrecv",
        server_url="http://localhost:8768",
        start_command=_start("media_sendrecv_server"),
        timeout=45,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Dart received", "{packetsReceived} packets"),
            ("Echo frames", "{remoteFramesReceived}"),
        ),
    ),
    Scenario(
        name="multi_client",
        title="Multi-Client",
        server_url="http://localhost:8783",
        start_command=_start("multi_client_server"),
        timeout=45,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Clients", "{maxConcurrentClients}"),
            ("DC Open", "{dcOpenClients}"),
            ("Messages", "{messagesSent}/{messagesReceived}"),
        ),
    ),
    Scenario(
        name="multi_client_recvonly",
        title="Multi-Client Recvonly",
        server_url="http://localhost:8792",
        start_command=_start("multi_client_recvonly_server"),
        timeout=50,
        reset_between=True,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Clients", "{maxConcurrentClients}"),
            ("RTP Packets", "{totalRtpPacketsReceived}"),
        ),
    ),
    Scenario(
        name="multi_client_sendonly",
        title="Multi-Client Sendonly",
        server_url="http://localhost:8791",
        start_command=_start("multi_client_sendonly_server"),
        timeout=50,
        reset_between=True,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Clients", "{maxConcurrentClients}"),
            ("Frames", "{totalFramesReceived}"),
        ),
    ),
    Scenario(
        name="multi_client_sendrecv",
        title="Multi-Client Sendrecv",
        server_url="http://localhost:8793",
        start_command=_start("multi_client_sendrecv_server"),
        timeout=90,
        reset_between=True,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Clients", "{maxConcurrentClients}"),
            ("RTP Received", "{totalRtpReceived}"),
            ("Echo Frames", "{totalEchoFrames}"),
        ),
    ),
    Scenario(
        name="save_to_disk",
        title="Save to Disk",
        server_url="http://localhost:8769",
        start_command=_start("save_to_disk_server"),
        skips={"firefox": SkipRule(reason="Skipped - no getUserMedia")},
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_av",
        title="Save to Disk Audio+Video",
        server_url="http://localhost:8773",
        start_command=_start("save_to_disk_server"),
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Video", "{videoPacketsReceived} packets"),
            ("Audio", "{audioPacketsReceived} packets"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_av1",
        title="Save to Disk AV1",
        server_url="http://localhost:8776",
        start_command=_start("save_to_disk_av1_server"),
        skips={
            "firefox": SkipRule(reason="AV1 not supported", explicit=True),
            "safari": SkipRule(reason="AV1 not supported", explicit=True),
        },
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("Keyframes", "{keyframesReceived}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_dtx",
        title="Save to Disk DTX",
        server_url="http://localhost:8775",
        start_command=_start("save_to_disk_dtx_server"),
        timeout=90,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Video", "{videoPacketsReceived} packets"),
            ("Audio", "{audioPacketsReceived} packets"),
            ("DTX", "speech={speechFrames}, inserted={dtxFramesInserted}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_dump",
        title="Save to Disk Dump",
        server_url="http://localhost:8774",
        start_command=_start("save_to_disk_dump_server"),
        timeout=50,
        settle_between=True,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Video", "{videoPacketsReceived} pkts, {videoFileSize} bytes"),
            ("Audio", "{audioPacketsReceived} pkts, {audioFileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_mp4_opus",
        title="Save to Disk MP4 Opus",
        server_url="http://localhost:8773",
        start_command=_start("save_to_disk_mp4_opus_server"),
        timeout=50,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("Frames", "{framesWritten}"),
            ("File Size", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_packetloss",
        title="Save to Disk Packet Loss",
        server_url="http://localhost:8774",
        start_command=_start("save_to_disk_packetloss_server"),
        timeout=90,
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("Keyframes", "{keyframesReceived}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="save_to_disk_vp9",
        title="Save to Disk VP9",
        server_url="http://localhost:8771",
        start_command=_start("save_to_disk_server"),
        skips={
            "firefox": ICE_ISSUE,
            "safari": SkipRule(reason="Skipped - VP9 not supported"),
        },
        metrics=_metrics(
            ("Packets", "{packetsReceived}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
    Scenario(
        name="sendrecv_answer",
        title="Sendrecv Answer",
        server_url="http://localhost:8777",
        start_command=_start("sendrecv_answer_server"),
        timeout=50,
        settle_between=True,
        metrics=_metrics(
            ("Recv", "{packetsReceived}, Echo: {packetsEchoed}"),
            ("Echo Frames", "{echoFramesReceived}"),
            ("Connection", "{connectionTimeMs}ms"),
        ),
    ),
    Scenario(
        name="simulcast",
        title="Simulcast",
        server_url="http://localhost:8780",
        start_command=_start("simulcast_server"),
        skips={"firefox": ICE_ISSUE},
        metrics=_metrics(
            ("Simulcast", "{simulcastNegotiated}"),
            ("Packets", "{packetsReceived}"),
            ("File", "{fileSize} bytes"),
        ),
    ),
)

CATALOG: Mapping[str, Scenario] = {scenario.name: scenario for scenario in SCENARIOS}


class UnknownScenarioError(ValueError):
    """Raised when a scenario name is not in the catalog."""


def get_scenario(name: str) -> Scenario:
    """Look up a built-in scenario by name.

    Raises:
        UnknownScenarioError: If no scenario has that name

    """
    try:
        return CATALOG[name]
    except KeyError:
        raise UnknownScenarioError(
            f"Scenario '{name}' not found. Available scenarios: {sorted(CATALOG)}"
        ) from None


def load_scenario_file(path: Path) -> Scenario:
    """Load a single scenario definition from a JSON document."""
    data = json.loads(path.read_text())
    return Scenario.model_validate(data)
