"""
GLSL sources for presenting the player surface

Attribute locations match SpriteBatch's vertex layout:
0 = position (window pixels), 1 = surface uv, 2 = tint (rgba).
"""

VERTEX_SHADER = """
#version 330 core
layout (location = 0) in vec2 in_position;
layout (location = 1) in vec2 in_uv;
layout (location = 2) in vec4 in_tint;

uniform mat4 u_projection;

out vec2 v_uv;
out vec4 v_tint;

void main() {
    v_uv = in_uv;
    v_tint = in_tint;
    gl_Position = u_projection * vec4(in_position, 0.0, 1.0);
}
"""

FRAGMENT_SHADER = """
#version 330 core
in vec2 v_uv;
in vec4 v_tint;

uniform sampler2D u_surface;

out vec4 out_color;

void main() {
    out_color = v_tint * texture(u_surface, v_uv);
}
"""
