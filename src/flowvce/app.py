"""Streamlit UI for Flow VCE."""

from __future__ import annotations

import streamlit as st
from streamlit.components.v1 import html as st_html

from flowvce import config, token_store
from flowvce.deployment import (
    NETWORKS,
    DeploymentError,
    WalrusDeployer,
    validate_private_key,
)
from flowvce.file_filter import (
    compile_patterns,
    matches_any_pattern,
    parse_pattern_input,
    validate_patterns,
)
from flowvce.generation import (
    GenerationError,
    SiteGenerator,
    estimate_generation_time,
    generate_site_name,
    validate_api_key,
)
from flowvce.models import FileRecord, FolderNode, GeneratedSite, TreeNode
from flowvce.project_files import (
    create_file,
    delete_node,
    rename_node,
    update_content,
)
from flowvce.providers.github import GitHubError, GitHubProvider, RateLimitError
from flowvce.site_bundle import (
    records_to_mapping,
    records_to_site,
    render_preview_html,
    site_to_records,
)
from flowvce.tree_builder import ValidationError, build_file_tree, find_node, iter_nodes
from flowvce.url_parser import URLParseError, parse_repo_url


def main() -> None:
    st.set_page_config(
        page_title="Flow VCE",
        page_icon="🌊",
        layout="wide",
    )

    st.markdown(
        "<style>[data-testid='stToolbar'] { display: none; }</style>",
        unsafe_allow_html=True,
    )

    header_left, header_right = st.columns([8, 1])
    with header_left:
        st.title("Flow VCE")
    with header_right:
        st.markdown("<div style='height: 1.5rem'></div>", unsafe_allow_html=True)
        with st.popover("⚙", use_container_width=True):
            settings = _settings_panel()

    st.caption("Describe a website, preview it, edit the files, and publish it.")

    prompt = st.text_area(
        "Describe your website",
        placeholder="A portfolio site for a landscape photographer with a dark theme",
        height=120,
    )
    if prompt:
        seconds = estimate_generation_time(prompt) / 1000
        st.caption(f"Estimated generation time: ~{seconds:.0f}s")

    gen_col, refine_col = st.columns(2)
    with gen_col:
        generate_clicked = st.button("Generate", type="primary", use_container_width=True)
    with refine_col:
        refine_clicked = st.button(
            "Refine current site",
            use_container_width=True,
            disabled="site" not in st.session_state,
        )

    if generate_clicked or refine_clicked:
        if not prompt.strip():
            st.error("Please describe your website.")
        else:
            _run_generation(prompt, settings, refine=refine_clicked)

    if "records" not in st.session_state:
        return

    preview_tab, files_tab, publish_tab = st.tabs(["Preview", "Files", "Publish"])
    with preview_tab:
        _show_preview()
    with files_tab:
        _file_browser()
    with publish_tab:
        _publish_panel(settings)


def _settings_panel() -> config.Settings:
    st.subheader("Settings")
    settings = config.load_settings(st.query_params)

    settings.anthropic_api_key = st.text_input(
        "Anthropic API key",
        value=settings.anthropic_api_key,
        type="password",
    ).strip()
    if settings.anthropic_api_key and not validate_api_key(settings.anthropic_api_key):
        st.warning("This does not look like an Anthropic API key.")

    settings.github_token = st.text_input(
        "GitHub token (optional)",
        value=settings.github_token,
        type="password",
        help="Needed to commit files and publish to GitHub Pages.",
    ).strip()

    settings.walrus_private_key = st.text_input(
        "Walrus private key (optional)",
        value=settings.walrus_private_key,
        type="password",
    ).strip()
    if settings.walrus_private_key and not validate_private_key(settings.walrus_private_key):
        st.warning("A private key is 64 hexadecimal characters.")

    network_index = NETWORKS.index(settings.walrus_network) if settings.walrus_network in NETWORKS else 1
    settings.walrus_network = st.selectbox("Walrus network", NETWORKS, index=network_index)

    if token_store.is_available():
        saved = token_store.has_secrets()
        remember = st.checkbox(
            "Save secrets to OS keychain",
            value=saved,
            help="Secrets are stored in macOS Keychain or Windows Credential Manager.",
        )
        config.remember_secrets(settings, remember)

    return settings


def _run_generation(prompt: str, settings: config.Settings, refine: bool) -> None:
    if not settings.anthropic_api_key:
        st.error("Add your Anthropic API key in Settings (⚙).")
        return

    generator = SiteGenerator(
        settings.anthropic_api_key,
        model=settings.model,
        max_tokens=settings.max_tokens,
    )
    try:
        with st.spinner("Generating your website..."):
            if refine:
                site = generator.refine_site(_current_site(), prompt)
            else:
                site = generator.generate_site(prompt)
    except GenerationError as exc:
        if exc.status_code:
            st.error(f"Generation failed (HTTP {exc.status_code}): {exc}")
        else:
            st.error(f"Generation failed: {exc}")
        return
    except Exception as exc:
        st.error(f"Unexpected error: {exc}")
        return

    if not refine:
        st.session_state["site_name"] = generate_site_name(prompt)
    st.session_state["site"] = site
    st.session_state["records"] = site_to_records(site)
    st.session_state.pop("deployment", None)
    st.success(f"Generated “{site.metadata.title}”.")


def _current_site() -> GeneratedSite:
    """Site assembled from the (possibly edited) file records."""
    site: GeneratedSite = st.session_state["site"]
    return records_to_site(st.session_state["records"], site.metadata)


def _show_preview() -> None:
    site = _current_site()
    st.markdown(f"**{site.metadata.title}** · {site.metadata.description}")
    st_html(render_preview_html(site), height=640, scrolling=True)


# ---------------------------------------------------------------------------
# File browser
# ---------------------------------------------------------------------------


def _file_browser() -> None:
    records: list[FileRecord] = st.session_state["records"]

    search_raw = st.text_input(
        "Search files (regex, comma-separated)",
        placeholder=r"\.css$, assets/",
    )
    patterns = parse_pattern_input(search_raw)
    for err in validate_patterns(patterns):
        st.error(f"Invalid regex: {err}")
    compiled = compile_patterns(patterns)
    visible = [r for r in records if matches_any_pattern(r.path, compiled)]

    try:
        tree = build_file_tree(visible)
    except ValidationError as exc:
        st.error(f"Cannot display the file tree. Offending path: `{exc.path}` ({exc.reason})")
        return

    tree_col, editor_col = st.columns([1, 2])
    with tree_col:
        for ancestors, node in iter_nodes(tree):
            indent = "\u2003\u2003" * len(ancestors)
            label = f"{indent}📁 {node.name}" if isinstance(node, FolderNode) else f"{indent}📄 {node.name}"
            if st.button(label, key=f"node:{node.path}", use_container_width=True):
                st.session_state["selected"] = node.path

        with st.expander("New file"):
            new_path = st.text_input("Path", key="new_file_path", placeholder="pages/about.html")
            if st.button("Create", key="create_file") and new_path:
                if _update_records(lambda rs: create_file(rs, new_path.strip())):
                    st.session_state["selected"] = new_path.strip()
                    st.rerun()

    with editor_col:
        selected = st.session_state.get("selected")
        node = find_node(tree, selected) if selected else None
        if node is None:
            st.info("Select a file or folder.")
            return
        _node_actions(node)


def _node_actions(node: TreeNode) -> None:
    st.markdown(f"`{node.path}`")

    name_col, rename_col, delete_col = st.columns([3, 1, 1])
    with name_col:
        new_name = st.text_input("Name", value=node.name, key=f"rename:{node.path}")
    with rename_col:
        st.markdown("<div style='height: 1.75rem'></div>", unsafe_allow_html=True)
        if st.button("Rename", key=f"do_rename:{node.path}") and new_name != node.name:
            if _update_records(lambda rs: rename_node(rs, node, new_name)):
                st.session_state.pop("selected", None)
                st.rerun()
    with delete_col:
        st.markdown("<div style='height: 1.75rem'></div>", unsafe_allow_html=True)
        if st.button("Delete", key=f"do_delete:{node.path}"):
            if _update_records(lambda rs: delete_node(rs, node)):
                st.session_state.pop("selected", None)
                st.rerun()

    if isinstance(node, FolderNode):
        st.caption(f"{len(node.children)} items")
        return

    record = next(r for r in st.session_state["records"] if r.path == node.path)
    st.caption(f"{record.language} · {record.size:,} bytes")
    content = st.text_area(
        "Content",
        value=record.content,
        height=480,
        key=f"content:{node.path}",
        disabled=not record.is_editable,
    )
    if content != record.content and st.button("Save", type="primary"):
        _update_records(lambda rs: update_content(rs, node.path, content))
        st.rerun()


def _update_records(operation) -> bool:
    """Apply *operation* to the file records; show errors instead of raising."""
    try:
        st.session_state["records"] = operation(st.session_state["records"])
    except ValidationError as exc:
        st.error(str(exc))
        return False
    except KeyError as exc:
        st.error(f"No such file or folder: {exc}")
        return False
    return True


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------


def _publish_panel(settings: config.Settings) -> None:
    walrus_col, github_col = st.columns(2)
    with walrus_col:
        _walrus_section(settings)
    with github_col:
        _github_section(settings)


def _walrus_section(settings: config.Settings) -> None:
    st.subheader("Walrus Sites")
    site_name = st.text_input(
        "Site name",
        value=st.session_state.get("site_name", "my-site"),
    )
    if st.button("Deploy to Walrus", type="primary", use_container_width=True):
        if not validate_private_key(settings.walrus_private_key):
            st.error("Add a valid Walrus private key in Settings (⚙).")
            return
        deployer = WalrusDeployer(settings.walrus_private_key, settings.walrus_network)
        try:
            with st.spinner("Deploying to Walrus Sites..."):
                st.session_state["deployment"] = deployer.deploy_site(_current_site(), site_name)
        except DeploymentError as exc:
            st.error(str(exc))
            return

    deployment = st.session_state.get("deployment")
    if deployment:
        st.success(f"Live at {deployment.url}")
        st.json({
            "objectId": deployment.object_id,
            "blobId": deployment.blob_id,
            "url": deployment.url,
            "transactionDigest": deployment.transaction_digest,
        })


def _github_section(settings: config.Settings) -> None:
    st.subheader("GitHub")
    url = st.text_input("Repository URL", placeholder="https://github.com/owner/repo")
    message = st.text_input("Commit message", value="Update site from Flow VCE")

    commit_col, pages_col = st.columns(2)
    commit_clicked = commit_col.button("Commit files", use_container_width=True)
    pages_clicked = pages_col.button("Deploy to Pages", use_container_width=True)
    if not (commit_clicked or pages_clicked):
        return

    if not settings.github_token:
        st.error("Add a GitHub token in Settings (⚙).")
        return
    try:
        repo_info = parse_repo_url(url)
    except URLParseError as exc:
        st.error(f"Invalid URL: {exc}")
        return

    provider = GitHubProvider(token=settings.github_token)
    files = records_to_mapping(st.session_state["records"])
    try:
        with st.spinner("Talking to GitHub..."):
            if commit_clicked:
                branch = repo_info.branch or provider.get_default_branch(repo_info)
                sha = provider.create_commit(repo_info.owner, repo_info.repo, message, files, branch)
                st.success(f"Committed {len(files)} files to {branch} ({sha[:7]}).")
            else:
                pages_url = provider.deploy_to_pages(
                    repo_info.owner,
                    repo_info.repo,
                    files,
                    message or "Deploy to GitHub Pages",
                    from_branch=repo_info.branch,
                )
                st.success(f"Published to {pages_url}")
    except RateLimitError as exc:
        st.error(str(exc))
    except GitHubError as exc:
        st.error(str(exc))
    except Exception as exc:
        st.error(f"Unexpected error: {exc}")


if __name__ == "__main__":
    main()
