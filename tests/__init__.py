#tests
