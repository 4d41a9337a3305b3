"""
CloudWatch Logs Insights widget builders for the Jitsi components

Each builder appends a text header followed by a fixed set of log query
widgets to a dashboard. The dashboard only needs an ``add_widgets`` method.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from aws_cdk import aws_cloudwatch as cloudwatch

from jitsi_constructs.logging_utils import setup_logger

logger = setup_logger(__name__)

LogGroups = Union[str, Sequence[str]]

DEFAULT_WIDTH = 8
DEFAULT_HEIGHT = 8
HEADER_WIDTH = 24
HEADER_HEIGHT = 1


@dataclass
class JitsiWidgetOptions:
    """
    Configuration options for Jitsi component widgets

    Unset fields fall back to the defaults of the component being added.
    """

    # Prefix used to filter log streams
    stream_prefix: Optional[str] = None
    # Widget base width (defaults to 8)
    width: Optional[int] = None
    # Widget base height (defaults to 8)
    height: Optional[int] = None
    # Time bin for aggregations (defaults to 15m, 5m for web)
    time_bin: Optional[str] = None


def _resolve_options(
    options: Optional[JitsiWidgetOptions], stream_prefix: str, time_bin: str = "15m"
) -> JitsiWidgetOptions:
    """Fill unset option fields with the component defaults"""
    options = options or JitsiWidgetOptions()
    return JitsiWidgetOptions(
        stream_prefix=(
            options.stream_prefix if options.stream_prefix is not None else stream_prefix
        ),
        width=options.width if options.width is not None else DEFAULT_WIDTH,
        height=options.height if options.height is not None else DEFAULT_HEIGHT,
        time_bin=options.time_bin if options.time_bin is not None else time_bin,
    )


def _log_group_names(log_groups: LogGroups) -> List[str]:
    if isinstance(log_groups, str):
        return [log_groups]
    return list(log_groups)


def _stream_filter(stream_prefix: str) -> str:
    return f'filter @logStream like "{stream_prefix}"'


def _scaled(width: int, factor: float) -> int:
    return int(width * factor)


def _header(markdown: str) -> cloudwatch.TextWidget:
    return cloudwatch.TextWidget(
        markdown=markdown,
        width=HEADER_WIDTH,
        height=HEADER_HEIGHT,
    )


def _add(dashboard, component: str, widgets: list) -> None:
    dashboard.add_widgets(*widgets)
    logger.debug(f"Added {len(widgets)} {component} widgets to dashboard")


def jitsi_widgets_web(
    dashboard,
    log_groups: LogGroups,
    options: Optional[JitsiWidgetOptions] = None,
) -> None:
    """
    Create Jitsi Web monitoring widgets and add them to the dashboard

    Args:
        dashboard: The dashboard to add widgets to
        log_groups: Log group name(s) to query
        options: Configuration options
    """
    opts = _resolve_options(options, stream_prefix="jitsi/web_", time_bin="5m")
    log_group_names = _log_group_names(log_groups)
    stream_filter = _stream_filter(opts.stream_prefix)

    _add(
        dashboard,
        "web",
        [
            _header("## Jitsi Web Monitoring Dashboard"),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Jitsi Web Error Rate",
                view=cloudwatch.LogQueryVisualizationType.LINE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    f'{stream_filter} and (@message like "ERROR" or @message like "error")',
                    f"stats count(*) as count by bin({opts.time_bin})",
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="HTTP Methods Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'parse @message /"(?<method>GET|POST|PUT|DELETE|HEAD|OPTIONS|PATCH) /',
                    "filter ispresent(method)",
                    "stats count(*) as count by method",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="HTTP Status Code Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    r'parse @message /(?<ip>[0-9.]+) (?<identd>\S+) (?<user>\S+) \[(?<timestamp>[^\]]+)\] "(?<request>[^"]*)" (?<status_code>\d{3}) (?<bytes>\d+) "(?<referrer>[^"]*)" "(?<agent>[^"]*)"/',
                    "filter ispresent(status_code)",
                    "stats count(*) as count by status_code",
                ],
            ),
        ],
    )


def jitsi_widgets_jvb(
    dashboard,
    log_groups: LogGroups,
    options: Optional[JitsiWidgetOptions] = None,
) -> None:
    """
    Create JVB (Jitsi Videobridge) monitoring widgets and add them to the dashboard

    The JVB widgets do not aggregate over time, so ``time_bin`` is ignored.
    """
    opts = _resolve_options(options, stream_prefix="jitsi/jvb_")
    log_group_names = _log_group_names(log_groups)
    stream_filter = _stream_filter(opts.stream_prefix)

    _add(
        dashboard,
        "jvb",
        [
            _header("## JVB (Jitsi Videobridge) Monitoring Dashboard"),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="JVB Log Levels Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    "parse @message 'JVB * * * ' as date, time, level, rest",
                    "filter ispresent(level)",
                    "stats count(*) as count by level",
                ],
            ),
        ],
    )


def jitsi_widgets_jicofo(
    dashboard,
    log_groups: LogGroups,
    options: Optional[JitsiWidgetOptions] = None,
) -> None:
    """
    Create Jicofo monitoring widgets and add them to the dashboard

    Args:
        dashboard: The dashboard to add widgets to
        log_groups: Log group name(s) to query
        options: Configuration options
    """
    opts = _resolve_options(options, stream_prefix="jitsi/jicofo_")
    log_group_names = _log_group_names(log_groups)
    stream_filter = _stream_filter(opts.stream_prefix)
    time_bin = opts.time_bin

    _add(
        dashboard,
        "jicofo",
        [
            _header("## Jicofo Monitoring Dashboard"),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Jicofo Log Levels Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    "parse @message 'Jicofo * * * ' as date, time, level, rest",
                    "filter ispresent(level)",
                    "stats count(*) as count by level",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Conference Requests",
                view=cloudwatch.LogQueryVisualizationType.BAR,
                width=_scaled(opts.width, 2),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "Conference request"',
                    f"stats count(*) as requestCount by bin({time_bin})",
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Member Join/Leave Events",
                view=cloudwatch.LogQueryVisualizationType.BAR,
                width=_scaled(opts.width, 1.5),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "JitsiMeetConferenceImpl.onMemberJoined" or @message like "JitsiMeetConferenceImpl.onMemberLeft"',
                    'parse @message "JitsiMeetConferenceImpl.*#" as eventType',
                    f'stats sum(eventType = "onMemberJoined") as Joined, sum(eventType = "onMemberLeft") as Left by bin({time_bin})',
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Active Conferences",
                view=cloudwatch.LogQueryVisualizationType.LINE,
                width=_scaled(opts.width, 1.5),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    r"parse @message /\[room=(?<room_id>[^ ]*) meeting_id=(?<meeting_id>[^\] ]*)/",
                    "filter ispresent(meeting_id)",
                    f"stats count_distinct(meeting_id) as count by bin({time_bin})",
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Conference Start/Stop Events",
                view=cloudwatch.LogQueryVisualizationType.BAR,
                width=_scaled(opts.width, 1.5),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "JitsiMeetConferenceImpl.<init>" or @message like "JitsiMeetConferenceImpl.stop"',
                    'parse @message "JitsiMeetConferenceImpl.*#" as eventType',
                    f'stats sum(eventType = "<init>") as Init, sum(eventType = "stop") as Stop by bin({time_bin})',
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Jibri Recording Session Start | Stop Events",
                view=cloudwatch.LogQueryVisualizationType.BAR,
                width=_scaled(opts.width, 1.5),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "JibriSession.startInternal" or @message like "JibriSession.stop"',
                    'parse @message "JibriSession.*#" as eventType',
                    f'stats sum(eventType = "startInternal") as Start, sum(eventType = "stop") as Stop by bin({time_bin})',
                    "sort @timestamp asc",
                ],
            ),
        ],
    )


def jitsi_widgets_prosody(
    dashboard,
    log_groups: LogGroups,
    options: Optional[JitsiWidgetOptions] = None,
) -> None:
    """Create Prosody monitoring widgets and add them to the dashboard"""
    opts = _resolve_options(options, stream_prefix="jitsi/prosody_")
    log_group_names = _log_group_names(log_groups)
    stream_filter = _stream_filter(opts.stream_prefix)
    time_bin = opts.time_bin

    _add(
        dashboard,
        "prosody",
        [
            _header("## Prosody Monitoring Dashboard"),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Prosody Log Levels Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    # Prosody separates the level from the message with a tab
                    r'parse @message "* * * *\t*" as date, time, connection_id, level, message',
                    "filter ispresent(level)",
                    "fields trim(level) as trim_level",
                    "stats count(*) as count by trim_level",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Client Connection Events",
                view=cloudwatch.LogQueryVisualizationType.BAR,
                width=_scaled(opts.width, 2),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "Client disconnected" or @message like "Client connected"',
                    f'stats sum(@message like "Client connected") as Connected, sum(@message like "Client disconnected") as Disconnected by bin({time_bin})',
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Active Client Connections",
                view=cloudwatch.LogQueryVisualizationType.LINE,
                width=_scaled(opts.width, 2),
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "Client connected" or @message like "Client disconnected"',
                    f'stats running_sum(if(@message like "Client connected", 1, -1)) as active_connections by bin({time_bin})',
                    "sort @timestamp asc",
                ],
            ),
        ],
    )


def jitsi_widgets_jibri(
    dashboard,
    log_groups: LogGroups,
    options: Optional[JitsiWidgetOptions] = None,
) -> None:
    """Create Jibri monitoring widgets and add them to the dashboard"""
    opts = _resolve_options(options, stream_prefix="jitsi/jibri_")
    log_group_names = _log_group_names(log_groups)
    stream_filter = _stream_filter(opts.stream_prefix)
    time_bin = opts.time_bin

    _add(
        dashboard,
        "jibri",
        [
            _header("## Jibri Monitoring Dashboard"),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Jibri Log Levels Distribution",
                view=cloudwatch.LogQueryVisualizationType.PIE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    "parse @message 'Jibri * * * ' as date, time, level, rest",
                    "filter ispresent(level)",
                    "stats count(*) as count by level",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Active Jibri Services",
                view=cloudwatch.LogQueryVisualizationType.LINE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'parse @logStream "jitsi/jibri_*-*" as version, container_id',
                    "filter ispresent(container_id)",
                    f"stats count_distinct(container_id) as activity_count by bin({time_bin})",
                    "sort @timestamp asc",
                ],
            ),
            cloudwatch.LogQueryWidget(
                log_group_names=log_group_names,
                title="Active Jibri Recordings",
                view=cloudwatch.LogQueryVisualizationType.LINE,
                width=opts.width,
                height=opts.height,
                query_lines=[
                    stream_filter,
                    'filter @message like "MediaReceivedStatusCheck.run"',
                    'parse @message "[session_id=*]" as session_id',
                    "filter ispresent(session_id)",
                    f"stats count_distinct(session_id) as count by bin({time_bin})",
                    "sort @timestamp asc",
                ],
            ),
        ],
    )
