"""AI-generated multiple-choice trivia with a console front-end."""
