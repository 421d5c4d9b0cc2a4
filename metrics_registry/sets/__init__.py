from .process import ProcessInstrumentSet

__all__ = ["ProcessInstrumentSet"]
