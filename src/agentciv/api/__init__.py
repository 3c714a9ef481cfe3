"""HTTP surface for the agentciv turn engine."""
