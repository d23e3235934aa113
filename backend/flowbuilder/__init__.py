"""Workflow builder: graph model and editing engine for trigger/action/condition automations."""
