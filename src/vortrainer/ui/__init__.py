"""Text readouts for the trainer window and headless runs."""
