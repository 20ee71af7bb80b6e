from flask import Flask, request, jsonify
from flask_cors import CORS
import expr_compiler as compiler

app = Flask(__name__)
app.config.from_mapping(
    MAX_EXPRESSION_LENGTH=500,
    PORT=5000,
    DEBUG=False,
)
app.config.from_prefixed_env("EXPRC")  # e.g. EXPRC_PORT=8080
CORS(app)  # allow cross-origin requests

def bad_request(message):
    return jsonify({"error": message}), 400

@app.route("/compile", methods=["POST"])
def compile_expression():
    data = request.get_json(silent=True)
    expression = data.get("expression") if isinstance(data, dict) else None
    if not expression or not isinstance(expression, str):
        return bad_request("Missing or invalid expression")

    max_len = app.config["MAX_EXPRESSION_LENGTH"]
    if len(expression) > max_len:
        return bad_request(f"Expression too long (max {max_len} characters)")

    try:
        result = compiler.compile_source(expression)
    except Exception as e:
        app.logger.exception("unexpected failure compiling %r", expression)
        return jsonify({"error": f"Unexpected error: {e}"}), 500

    if result['error']:
        app.logger.info("rejected %r: %s", expression, result['error'])
        return bad_request(result['error'])

    response = {
        "tokens": compiler.format_tokens(result['tokens']),
        "syntaxTree": result['syntax_tree'],
        "semantic": result['semantic'].to_text(),
        "intermediate": "\n".join(result['tac']),
        "final": result['asm'],
        "ast": compiler.ast_to_dict(result['ast']),
    }
    return jsonify(response)

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"], port=app.config["PORT"])
