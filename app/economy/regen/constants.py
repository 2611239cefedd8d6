DEFAULT_MAX_COMMIT_ATTEMPTS = 3
CONTENTION_RETRY_AFTER_SECONDS = 5
