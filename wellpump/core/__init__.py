"""Core domain logic for WellPump: persistence, selection and advice."""
