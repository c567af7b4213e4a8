"""
VRF Raffle Package
Automated lottery settled with verifiable randomness
"""

__version__ = "1.0.0"

# Export main components
from .chain import LocalChain
from .config import RaffleConfig
from .coordinator import VRFCoordinatorMock
from .database import DrawHistory, setup_raffle_database
from .deploy import deploy_mocks, deploy_raffle
from .raffle import Raffle
from .rounds import RaffleState

__all__ = [
    'LocalChain',
    'RaffleConfig',
    'VRFCoordinatorMock',
    'DrawHistory',
    'setup_raffle_database',
    'deploy_mocks',
    'deploy_raffle',
    'Raffle',
    'RaffleState',
]
