# lark grammar for the statements understood by slotdb
# NOTE: keywords are only recognized as the first token; the
# lexer is contextual, so e.g. "select" is a valid username
GRAMMAR = r'''
        ?stmnt           : insert_stmnt | select_stmnt

        insert_stmnt     : "insert" row_id username email
        // select takes no arguments; any trailing tokens are ignored
        select_stmnt     : "select" ARG*

        row_id           : INTEGER_NUMBER
        username         : ARG
        email            : ARG

        // digits only, and must end at whitespace or end of input
        INTEGER_NUMBER   : /[0-9]+(?!\S)/
        ARG              : /\S+/
        WHITESPACE       : /\s+/

        %ignore WHITESPACE
'''
