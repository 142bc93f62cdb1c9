"""Prompt templates for the pump advisor."""

PUMP_SELECTION_PROMPT = """You are a pump selection expert. Provide just the name of the pump you would recommend.
You are given two pump charts and a head and gpm.
Pump 1: {pump_a}
Pump 2: {pump_b}
Head: {head:.1f}
GPM: {gpm:g}
"""
