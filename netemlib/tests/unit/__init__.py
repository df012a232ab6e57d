import unittest


class NetemTest(unittest.TestCase):
    pass
