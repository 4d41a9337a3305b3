"""
Tests for the Jitsi Monitoring Stack
"""

import json

import aws_cdk as cdk
import aws_cdk.assertions as assertions
import pytest
from jitsi_constructs.jitsi_dashboard import DashboardConfigurationError
from stacks.monitoring_stack import JitsiMonitoringStack


def _template_text(stack: cdk.Stack) -> str:
    return json.dumps(assertions.Template.from_stack(stack).to_json())


def test_monitoring_stack_creation():
    """Test that the monitoring stack creates a single named dashboard"""
    app = cdk.App()
    stack = JitsiMonitoringStack(app, "TestMonitoringStack")
    template = assertions.Template.from_stack(stack)

    template.resource_count_is("AWS::CloudWatch::Dashboard", 1)
    template.has_resource_properties(
        "AWS::CloudWatch::Dashboard", {"DashboardName": "Jitsi-dev"}
    )


def test_all_components_by_default():
    """Test that every component is added when none are configured"""
    app = cdk.App()
    stack = JitsiMonitoringStack(app, "TestMonitoringStack")
    body = _template_text(stack)

    assert stack.components == ["web", "jvb", "jicofo", "prosody", "jibri"]
    assert stack.log_groups == ["/jitsi/dev"]
    for title in [
        "Jitsi Web Error Rate",
        "JVB Log Levels Distribution",
        "Active Conferences",
        "Active Client Connections",
        "Active Jibri Recordings",
    ]:
        assert title in body
    assert "SOURCE '/jitsi/dev'" in body


def test_context_configuration():
    """Test that context values are properly applied"""
    app = cdk.App(
        context={
            "envName": "test",
            "dashboardName": "jitsi-meet",
            "jitsiLogGroups": ["/jitsi/meet", "/jitsi/recording"],
            "jitsiComponents": "web, jibri",
            "jitsiWidgetWidth": 6,
            "jitsiTimeBin": "30m",
        }
    )
    stack = JitsiMonitoringStack(app, "TestMonitoringStack")
    template = assertions.Template.from_stack(stack)
    body = _template_text(stack)

    template.has_resource_properties(
        "AWS::CloudWatch::Dashboard", {"DashboardName": "jitsi-meet"}
    )
    assert stack.components == ["web", "jibri"]
    assert "SOURCE '/jitsi/meet' | SOURCE '/jitsi/recording'" in body
    assert "Jicofo Monitoring Dashboard" not in body
    assert "bin(30m)" in body
    assert "bin(5m)" not in body
    assert "dashboards:name=jitsi-meet" in stack.dashboard_url


def test_unknown_component_in_context():
    """Test that a misconfigured component list fails synthesis"""
    app = cdk.App(context={"jitsiComponents": ["web", "coturn"]})

    with pytest.raises(DashboardConfigurationError):
        JitsiMonitoringStack(app, "TestMonitoringStack")
