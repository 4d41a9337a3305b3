"""
Monitoring Stack for a Jitsi deployment
"""

from aws_cdk import Stack
from constructs import Construct
from jitsi_constructs.jitsi_dashboard import COMPONENTS, JitsiCloudWatchDashboard
from jitsi_constructs.widgets import JitsiWidgetOptions


def _as_list(value):
    """Normalize a context value given as a list or comma-separated string"""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value)


class JitsiMonitoringStack(Stack):
    """
    Stack containing the CloudWatch dashboard for the Jitsi components
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Get context values
        env_name = self.node.try_get_context("envName") or "dev"
        dashboard_name = self.node.try_get_context("dashboardName") or f"Jitsi-{env_name}"
        log_groups = _as_list(
            self.node.try_get_context("jitsiLogGroups") or f"/jitsi/{env_name}"
        )
        components = _as_list(
            self.node.try_get_context("jitsiComponents") or list(COMPONENTS)
        )

        # Overrides applied to every component; unset values keep the defaults
        width = self.node.try_get_context("jitsiWidgetWidth")
        height = self.node.try_get_context("jitsiWidgetHeight")
        options = JitsiWidgetOptions(
            width=int(width) if width is not None else None,
            height=int(height) if height is not None else None,
            time_bin=self.node.try_get_context("jitsiTimeBin"),
        )

        # Create CloudWatch dashboard
        self.dashboard = JitsiCloudWatchDashboard(
            self,
            "Dashboard",
            dashboard_id="JitsiDashboard",
            dashboard_props={"dashboard_name": dashboard_name},
        )
        self.dashboard.add_components(log_groups, components, options)

        # Store references for outputs
        self.log_groups = log_groups
        self.components = components
        self.dashboard_url = f"https://console.aws.amazon.com/cloudwatch/home?region={self.region}#dashboards:name={dashboard_name}"
