#!/usr/bin/env python3
"""
Jitsi CloudWatch monitoring
Main CDK application entry point
"""

import sys
import os
sys.path.insert(0, os.path.dirname(__file__))

import aws_cdk as cdk
from jitsi_constructs.logging_utils import setup_logger
from stacks.monitoring_stack import JitsiMonitoringStack

logger = setup_logger("jitsi_monitoring")


def main():
    app = cdk.App()

    # Get context values with defaults
    env_name = app.node.try_get_context("envName") or "dev"
    account = app.node.try_get_context("account") or None
    region = app.node.try_get_context("region") or None

    env = cdk.Environment(account=account, region=region)

    monitoring_stack = JitsiMonitoringStack(
        app,
        f"jitsi-monitoring-{env_name}",
        env=env,
        description="CloudWatch Logs Insights dashboard for Jitsi components",
    )

    # Add tags to the stack
    cdk.Tags.of(monitoring_stack).add("Project", "JitsiMonitoring")
    cdk.Tags.of(monitoring_stack).add("Environment", env_name)

    logger.info(
        f"Synthesizing dashboard for components {', '.join(monitoring_stack.components)} "
        f"over log groups {', '.join(monitoring_stack.log_groups)}"
    )

    app.synth()


if __name__ == "__main__":
    main()
