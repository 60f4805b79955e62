"""
Study plan generation.

Modules:
- state_analyzer: learner state (weaknesses, velocity, engagement, tolerance)
- timeline: hours needed, weekly pace, milestones
- distributor: weekly share per component
- session_generator: dated StudySession records
- spaced_repetition: review sessions from completed work
- lifecycle: session and plan state transitions
- planner: StudyPlanner, the orchestrator

Import StudyPlanner from src.planning.planner; this package stays import-light
because src.analytics depends on src.planning.state_analyzer.
"""
