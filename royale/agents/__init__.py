"""
Agent implementations for simulated match participants.
"""

from .base_agent import BaseAgent, AgentContext, AgentAction
from .dummy_agent import DummyAgent

__all__ = ['BaseAgent', 'AgentContext', 'AgentAction', 'DummyAgent']
