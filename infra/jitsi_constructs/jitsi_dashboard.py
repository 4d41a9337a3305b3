"""
CloudWatch Dashboard construct for Jitsi components
"""

from typing import Any, Mapping, Optional, Sequence, Union

from aws_cdk import Annotations, aws_cloudwatch as cloudwatch
from constructs import Construct

from jitsi_constructs.logging_utils import setup_logger
from jitsi_constructs.widgets import (
    JitsiWidgetOptions,
    LogGroups,
    jitsi_widgets_jibri,
    jitsi_widgets_jicofo,
    jitsi_widgets_jvb,
    jitsi_widgets_prosody,
    jitsi_widgets_web,
)

logger = setup_logger(__name__)

COMPONENT_BUILDERS = {
    "web": jitsi_widgets_web,
    "jvb": jitsi_widgets_jvb,
    "jicofo": jitsi_widgets_jicofo,
    "prosody": jitsi_widgets_prosody,
    "jibri": jitsi_widgets_jibri,
}

COMPONENTS = tuple(COMPONENT_BUILDERS)


class DashboardConfigurationError(ValueError):
    """Raised when the dashboard construct is configured inconsistently"""


class JitsiCloudWatchDashboard(Construct):
    """
    CloudWatch Dashboard for Jitsi components

    Wraps an existing dashboard or creates a new one, and adds monitoring
    widgets for the various Jitsi services to it.

    Args:
        scope: The parent construct
        construct_id: The construct's identifier
        dashboard: Existing dashboard to use
        dashboard_id: ID for a new dashboard (required if dashboard not provided)
        dashboard_props: Props for a new dashboard, either a
            ``cloudwatch.DashboardProps`` or a mapping of ``Dashboard`` keyword
            arguments. Only used when no existing dashboard is given.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        dashboard: Optional[cloudwatch.Dashboard] = None,
        dashboard_id: Optional[str] = None,
        dashboard_props: Optional[
            Union[cloudwatch.DashboardProps, Mapping[str, Any]]
        ] = None,
        **kwargs,
    ) -> None:
        if dashboard is None and not dashboard_id:
            raise DashboardConfigurationError(
                "Either a dashboard construct or dashboard_id with optional props must be provided"
            )

        if dashboard is not None and dashboard_id:
            raise DashboardConfigurationError(
                "Either a dashboard construct or dashboard_id with optional props must be provided, not both"
            )

        super().__init__(scope, construct_id, **kwargs)

        if dashboard is not None:
            if dashboard_props is not None:
                message = "dashboard_props will be ignored as an existing dashboard is being used"
                logger.warning(message)
                Annotations.of(self).add_warning_v2(
                    "jitsi-dashboard:ignoredDashboardProps", message
                )
            self.dashboard = dashboard
        else:
            self.dashboard = cloudwatch.Dashboard(
                self, dashboard_id, **_dashboard_kwargs(dashboard_props)
            )
            logger.info(f"Created CloudWatch dashboard {dashboard_id}")

    @property
    def dashboard_name(self) -> str:
        """Return the dashboard name"""
        return self.dashboard.dashboard_name

    def add_web(
        self, log_groups: LogGroups, options: Optional[JitsiWidgetOptions] = None
    ) -> None:
        """Add Jitsi Web monitoring widgets to the dashboard"""
        jitsi_widgets_web(self.dashboard, log_groups, options)

    def add_jvb(
        self, log_groups: LogGroups, options: Optional[JitsiWidgetOptions] = None
    ) -> None:
        """Add JVB (Jitsi Videobridge) monitoring widgets to the dashboard"""
        jitsi_widgets_jvb(self.dashboard, log_groups, options)

    def add_jicofo(
        self, log_groups: LogGroups, options: Optional[JitsiWidgetOptions] = None
    ) -> None:
        """Add Jicofo monitoring widgets to the dashboard"""
        jitsi_widgets_jicofo(self.dashboard, log_groups, options)

    def add_prosody(
        self, log_groups: LogGroups, options: Optional[JitsiWidgetOptions] = None
    ) -> None:
        """Add Prosody monitoring widgets to the dashboard"""
        jitsi_widgets_prosody(self.dashboard, log_groups, options)

    def add_jibri(
        self, log_groups: LogGroups, options: Optional[JitsiWidgetOptions] = None
    ) -> None:
        """Add Jibri monitoring widgets to the dashboard"""
        jitsi_widgets_jibri(self.dashboard, log_groups, options)

    def add_components(
        self,
        log_groups: LogGroups,
        components: Sequence[str] = COMPONENTS,
        options: Optional[JitsiWidgetOptions] = None,
    ) -> None:
        """
        Add widgets for several components, in the given order

        Raises:
            DashboardConfigurationError: if a component name is unknown
        """
        unknown = [c for c in components if c not in COMPONENT_BUILDERS]
        if unknown:
            raise DashboardConfigurationError(
                f"Unknown Jitsi component(s): {', '.join(unknown)}. "
                f"Valid components are: {', '.join(COMPONENTS)}"
            )

        for component in components:
            COMPONENT_BUILDERS[component](self.dashboard, log_groups, options)


def _dashboard_kwargs(dashboard_props) -> dict:
    if dashboard_props is None:
        return {}
    if isinstance(dashboard_props, cloudwatch.DashboardProps):
        return dict(dashboard_props._values)
    return dict(dashboard_props)
