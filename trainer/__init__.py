"""Session state, settings/stats persistence and configuration for one learner."""
