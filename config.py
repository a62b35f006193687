'''
Simulation settings - global defaults, grid presets and per-run configuration
'''


# Standard Library:
import math
from typing import Any, Self

# Local:
from errors import InvalidConfiguration, InvalidDimension, NodeOutOfRange


# Global Constants:
ROWS = 2
COLS = 2
CYCLE_SECONDS = 30  # Green time shared by the four lanes each cycle
SERVICE_RATE = 0.5  # Vehicles discharged per second of green
MAX_ARRIVAL_PER_LANE = 5  # Arrivals per lane per cycle are 0 - #
INITIAL_QUEUE_MAX = 19  # Starting queues per lane are 0 - #
NUM_CYCLES = 5
RANDOM_SEED = 42
EMERGENCY_CYCLE = 3  # Cycle (1-based) in which the ambulance crosses the grid
ROUTE_MODE = 'congestion'  # shortest | congestion
GRID_SIZE = 'small'  # small | medium | large

ROUTE_MODES = ('shortest', 'congestion')


class SimConfig:
    '''
    Values for one simulation run

    emergency_src/emergency_dest of None means no emergency vehicle.
    '''
    def __init__(self, rows: int=ROWS, cols: int=COLS, num_cycles: int=NUM_CYCLES,
                 cycle_seconds: int=CYCLE_SECONDS, service_rate: float=SERVICE_RATE,
                 max_arrival_per_lane: int=MAX_ARRIVAL_PER_LANE,
                 initial_queue_max: int=INITIAL_QUEUE_MAX, seed: int | None=RANDOM_SEED,
                 emergency_src: int | None=0, emergency_dest: int | None=None,
                 emergency_cycle: int=EMERGENCY_CYCLE, route_mode: str=ROUTE_MODE,
                 verbose: bool=True, debug: bool=False) -> None:
        self.rows = rows
        self.cols = cols
        self.num_cycles = num_cycles
        self.cycle_seconds = cycle_seconds
        self.service_rate = service_rate
        self.max_arrival_per_lane = max_arrival_per_lane
        self.initial_queue_max = initial_queue_max
        self.seed = seed
        self.emergency_src = emergency_src
        # Default destination is the far corner:
        if emergency_dest is None and emergency_src is not None:
            emergency_dest = rows * cols - 1
        self.emergency_dest = emergency_dest
        self.emergency_cycle = emergency_cycle
        self.route_mode = route_mode
        self.verbose = verbose
        self.debug = debug

    def __repr__(self) -> str:
        return (f'SimConfig({self.rows}x{self.cols}, {self.num_cycles=}, {self.cycle_seconds=}, '
                f'{self.service_rate=}, {self.route_mode=})')

    @property
    def emergency(self) -> bool:
        return self.emergency_src is not None and self.emergency_dest is not None

    @classmethod
    def from_environment(cls, size: str, **overrides: Any) -> Self:
        env = get_environment(size)
        settings = {
            'rows': env['rows'],
            'cols': env['cols'],
            'num_cycles': env['num_cycles'],
            'emergency_src': env['emergency_path'][0],
            'emergency_dest': env['emergency_path'][1],
            'emergency_cycle': env['emergency_cycle'],
        }
        settings.update(overrides)
        return cls(**settings)

    def validate(self) -> Self:
        '''
        Reject out-of-range settings before anything is simulated
        '''
        for name in ('rows', 'cols'):
            value = getattr(self, name)
            if not is_int(value) or value <= 0:
                raise InvalidDimension(f'Expected positive integer for {name}, got: {value!r}')
        if not is_int(self.num_cycles) or self.num_cycles < 0:
            raise InvalidConfiguration(f'Cycle count must be a non-negative integer, got: {self.num_cycles!r}')
        if not is_int(self.cycle_seconds) or self.cycle_seconds < 1:
            raise InvalidConfiguration(f'Cycle duration must be at least 1 second, got: {self.cycle_seconds!r}')
        if isinstance(self.service_rate, bool) or not isinstance(self.service_rate, (int, float)) \
                or not self.service_rate >= 0 or not math.isfinite(self.service_rate):
            raise InvalidConfiguration('Service rate must be a finite non-negative number, '
                                       f'got: {self.service_rate!r}')
        if not is_int(self.max_arrival_per_lane) or self.max_arrival_per_lane < 0:
            raise InvalidConfiguration('Arrival bound must be a non-negative integer, '
                                       f'got: {self.max_arrival_per_lane!r}')
        if not is_int(self.initial_queue_max) or self.initial_queue_max < 0:
            raise InvalidConfiguration('Initial queue bound must be a non-negative integer, '
                                       f'got: {self.initial_queue_max!r}')
        if self.route_mode not in ROUTE_MODES:
            raise InvalidConfiguration(f'Expected route mode of {" or ".join(ROUTE_MODES)}, '
                                       f'got: {self.route_mode!r}')
        if self.emergency:
            nodes = self.rows * self.cols
            for name in ('emergency_src', 'emergency_dest'):
                value = getattr(self, name)
                if not is_int(value) or not 0 <= value < nodes:
                    raise NodeOutOfRange(f'{name} {value!r} outside of grid with {nodes} intersections')
            if not is_int(self.emergency_cycle) or self.emergency_cycle < 1:
                raise InvalidConfiguration('Emergency cycle must be a positive integer, '
                                           f'got: {self.emergency_cycle!r}')
            if self.emergency_cycle > self.num_cycles:
                raise InvalidConfiguration(f'Emergency cycle {self.emergency_cycle} comes after the last '
                                           f'of {self.num_cycles} cycles')
        return self


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def get_environment(size: str) -> dict[str, Any]:
    '''
    Convenience function to select a traffic grid environment
    '''
    # Small 2x2 traffic grid:
    small = {
        'rows': 2,
        'cols': 2,
        'num_cycles': 5,
        'emergency_path': (0, 3),
        'emergency_cycle': 3,
    }

    # Medium 4x4 traffic grid:
    medium = {
        'rows': 4,
        'cols': 4,
        'num_cycles': 10,
        'emergency_path': (12, 3),
        'emergency_cycle': 5,
    }

    # Large 8x8 traffic grid:
    large = {
        'rows': 8,
        'cols': 8,
        'num_cycles': 20,
        'emergency_path': (56, 7),
        'emergency_cycle': 10,
    }

    match size:
        case 'small':
            return small
        case 'medium':
            return medium
        case 'large':
            return large
        case _:
            raise ValueError(f'Expected traffic grid size of small, medium, or large, got: {size}')
