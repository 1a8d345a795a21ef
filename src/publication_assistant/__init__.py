"""Publication assistant: a REST service over employees and their publications."""
