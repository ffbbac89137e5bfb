"""pughtodo - a todo list ranked by a weighted Pugh score."""
