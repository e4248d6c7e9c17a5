"""
Workplace to Slack Relay

A small webhook service that receives Workplace group-post notifications,
verifies them, resolves group and author names through the Graph API,
and posts a formatted notification to a Slack incoming webhook.
"""

__version__ = "1.0.0"
__author__ = "Workplace Relay Team"
