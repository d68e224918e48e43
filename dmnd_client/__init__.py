"""Mining proxy core: health state, share accounting relay, job id tracking, task management and monitoring client."""

__version__ = "0.2.4"