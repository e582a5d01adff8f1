# scratch database file used by tests; nuked at the start of each test
TEST_DB_FILE = 'testdb.file'
TEST_INPUT_FILE = 'testinput.txt'
