'''
Error types raised by the traffic grid simulation
'''


class GridSimError(ValueError):
    '''
    Base class for all traffic grid simulation errors
    '''


class InvalidDimension(GridSimError):
    '''
    Grid rows or columns are not positive integers
    '''


class NodeOutOfRange(GridSimError):
    '''
    A node id is outside [0, rows * cols)
    '''


class InvalidConfiguration(GridSimError):
    '''
    Cycle duration, service rate or arrival bound out of range
    '''
