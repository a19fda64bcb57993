"""Compilation — route list to generated TypeScript client.

Pipeline: session (discovery + extraction) -> tree -> emitter/synthesizer
-> assembler -> atomic write.
"""
