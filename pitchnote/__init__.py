"""PitchNote: match records, lineups and MVP tracking for amateur soccer teams."""

__version__ = "0.1.0"
