"""
Dilemma Arena: user-authored strategies for the Iterated Prisoner's Dilemma,
compiled from IF / ELSEIF / ELSE logic trees and ranked in round-robin
tournaments.
"""

__version__ = "0.1.0"
