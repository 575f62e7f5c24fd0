INDEX_HTML = r'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Public Files</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: #f5f5f5; padding: 20px; line-height: 1.6; }
        .container { max-width: 1100px; margin: 0 auto; display: grid; grid-template-columns: 1fr 300px; gap: 20px; }
        .panel { background: white; border-radius: 10px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); overflow: hidden; }
        .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 24px 30px; }
        .header h1 { font-size: 24px; }
        .breadcrumb { display: flex; gap: 8px; margin-top: 10px; flex-wrap: wrap; }
        .breadcrumb a { color: rgba(255,255,255,0.9); text-decoration: none; padding: 2px 8px; border-radius: 5px; }
        .breadcrumb a:hover { background: rgba(255,255,255,0.15); }
        .breadcrumb span { color: rgba(255,255,255,0.6); }
        .main-content { padding: 24px 30px; }
        .actions { display: flex; gap: 15px; margin-bottom: 20px; flex-wrap: wrap; }
        .actions form { flex: 1; min-width: 240px; display: flex; gap: 10px; }
        .actions input { flex: 1; padding: 8px; border: 1px solid #ddd; border-radius: 5px; font-size: 14px; }
        .btn { padding: 8px 16px; border: none; border-radius: 5px; cursor: pointer; font-size: 14px; font-weight: 500; color: white; }
        .btn-primary { background: #667eea; }
        .btn-secondary { background: #48bb78; }
        .btn-danger { background: #f56565; }
        .status { padding: 10px 16px; border-radius: 5px; margin-bottom: 16px; display: none; }
        .status.success { background: #c6f6d5; color: #22543d; display: block; }
        .status.error { background: #fed7d7; color: #742a2a; display: block; }
        .status.info { background: #bee3f8; color: #2c5282; display: block; }
        .file-list, .recent-list { list-style: none; }
        .file-item { display: flex; align-items: center; padding: 12px; border-bottom: 1px solid #eee; }
        .file-item:hover { background: #f7fafc; }
        .file-icon { font-size: 22px; margin-right: 12px; }
        .file-info { flex: 1; }
        .file-name a { color: #2d3748; text-decoration: none; font-weight: 500; }
        .file-meta { font-size: 12px; color: #718096; }
        .virtual-tag { font-size: 11px; color: #805ad5; margin-left: 6px; }
        .recent-list li { padding: 10px 16px; border-bottom: 1px solid #eee; font-size: 14px; }
        .recent-list a { color: #2d3748; text-decoration: none; }
        .side-title { padding: 16px; font-weight: 600; border-bottom: 1px solid #eee; display: flex; justify-content: space-between; }
        .empty-state { text-align: center; padding: 40px 20px; color: #718096; }
    </style>
</head>
<body>
    <div class="container">
        <div class="panel">
            <div class="header">
                <h1>📁 Public Files</h1>
                <div class="breadcrumb" id="breadcrumb"></div>
            </div>
            <div class="main-content">
                <div class="actions">
                    <form id="uploadForm">
                        <input type="file" id="fileToUpload" name="file" required>
                        <button type="submit" class="btn btn-primary">Upload</button>
                    </form>
                    <form id="createFolderForm">
                        <input type="text" id="folderName" placeholder="New folder name" required pattern="[^<>:&quot;/\\|?*]+" title="Avoid special characters">
                        <button type="submit" class="btn btn-secondary">Create Folder</button>
                    </form>
                    <button class="btn btn-danger" id="removeAllBtn">Remove All</button>
                </div>
                <div id="status" class="status"></div>
                <ul class="file-list" id="fileList"></ul>
                <div class="empty-state" id="emptyState" style="display: none;">This folder is empty</div>
            </div>
        </div>
        <div class="panel">
            <div class="side-title"><span>Recent Files</span><a href="#" id="retryRecent">↻</a></div>
            <ul class="recent-list" id="recentList"></ul>
        </div>
    </div>

    <script>
        let currentPath = '';
        const statusDiv = document.getElementById('status');
        const fileList = document.getElementById('fileList');
        const emptyState = document.getElementById('emptyState');
        const breadcrumb = document.getElementById('breadcrumb');
        const recentList = document.getElementById('recentList');

        function showStatus(message, type = 'info', timeout = 3000) {
            statusDiv.textContent = message;
            statusDiv.className = `status ${type}`;
            if (timeout > 0) {
                setTimeout(() => statusDiv.className = 'status', timeout);
            }
        }

        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = text;
            return div.innerHTML;
        }

        function formatSize(bytes) {
            if (bytes === undefined || bytes === null) return '';
            const units = ['Bytes', 'KB', 'MB', 'GB', 'TB'];
            let i = 0;
            while (bytes >= 1024 && i < units.length - 1) { bytes /= 1024; i++; }
            return `${bytes.toFixed(i ? 2 : 0)} ${units[i]}`;
        }

        async function request(url, options = {}) {
            const response = await fetch(url, options);
            const data = await response.json();
            if (!response.ok || data.success === false) {
                throw new Error(data.message || 'Request failed');
            }
            return data;
        }

        function updateBreadcrumb() {
            breadcrumb.innerHTML = '<a href="#" data-path="">🏠 Home</a>';
            if (currentPath) {
                let path = '';
                currentPath.split('/').forEach((part, i) => {
                    path += (i > 0 ? '/' : '') + part;
                    breadcrumb.innerHTML += ` <span>/</span> <a href="#" data-path="${escapeHtml(path)}">${escapeHtml(part)}</a>`;
                });
            }
        }

        async function loadFolder(path = '') {
            currentPath = path;
            updateBreadcrumb();
            try {
                const node = await request(`/api/public-folders?path=${encodeURIComponent(path)}`);
                fileList.innerHTML = '';
                emptyState.style.display = node.children.length ? 'none' : 'block';
                node.children.forEach(item => {
                    const li = document.createElement('li');
                    li.className = 'file-item';
                    const isFolder = item.type === 'folder';
                    li.innerHTML = `
                        <span class="file-icon">${isFolder ? '📁' : '📄'}</span>
                        <div class="file-info">
                            <div class="file-name"><a href="#">${escapeHtml(item.name)}</a></div>
                            <div class="file-meta">${isFolder ? `${item.children.length} item(s)` : formatSize(item.size)}</div>
                        </div>
                        <button class="btn btn-danger">Delete</button>`;
                    li.querySelector('a').addEventListener('click', (e) => {
                        e.preventDefault();
                        isFolder ? loadFolder(item.path) : openFile(item);
                    });
                    li.querySelector('button').addEventListener('click', () => deleteItem(item));
                    fileList.appendChild(li);
                });
            } catch (error) {
                showStatus(`Error: ${error.message}`, 'error', 0);
            }
        }

        async function loadRecent() {
            try {
                const response = await fetch('/api/recent-files');
                const files = await response.json();
                recentList.innerHTML = files.length ? '' : '<li>No recent files</li>';
                files.forEach(file => {
                    const li = document.createElement('li');
                    li.innerHTML = `<a href="#">${escapeHtml(file.name)}</a><div class="file-meta">${escapeHtml(file.path)} • ${file.sizeLabel}</div>`;
                    li.querySelector('a').addEventListener('click', (e) => { e.preventDefault(); openFile(file); });
                    recentList.appendChild(li);
                });
            } catch (error) {
                recentList.innerHTML = '<li>Could not load recent files</li>';
            }
        }

        function refresh() {
            loadFolder(currentPath);
            loadRecent();
        }

        function openFile(file) {
            window.open(`/api/download?inline=true&path=${encodeURIComponent(file.path)}`, '_blank');
            setTimeout(loadRecent, 500);
        }

        async function deleteItem(item) {
            const kind = item.type === 'folder' ? 'folder' : 'file';
            if (!confirm(`Delete ${kind} "${item.name}"?`)) return;
            try {
                const data = await request(`/api/delete-${kind}?path=${encodeURIComponent(item.path)}`, { method: 'DELETE' });
                showStatus(data.message, 'success');
                refresh();
            } catch (error) {
                showStatus(`Delete failed: ${error.message}`, 'error');
            }
        }

        breadcrumb.addEventListener('click', (e) => {
            if (e.target.tagName === 'A') {
                e.preventDefault();
                loadFolder(e.target.dataset.path);
            }
        });

        document.getElementById('uploadForm').addEventListener('submit', async (e) => {
            e.preventDefault();
            const input = document.getElementById('fileToUpload');
            if (!input.files.length) return;
            const formData = new FormData();
            formData.append('file', input.files[0]);
            formData.append('path', currentPath);
            showStatus('Uploading...', 'info', 0);
            try {
                const data = await request('/api/upload', { method: 'POST', body: formData });
                showStatus(`Uploaded ${data.fileName}`, 'success');
                e.target.reset();
                refresh();
            } catch (error) {
                showStatus(`Upload failed: ${error.message}`, 'error');
            }
        });

        document.getElementById('createFolderForm').addEventListener('submit', async (e) => {
            e.preventDefault();
            const name = document.getElementById('folderName').value.trim();
            try {
                const data = await request('/api/folders', {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify({ name, parentPath: currentPath })
                });
                showStatus(data.message, 'success');
                e.target.reset();
                refresh();
            } catch (error) {
                showStatus(`Error: ${error.message}`, 'error');
            }
        });

        document.getElementById('removeAllBtn').addEventListener('click', async () => {
            if (!confirm('Remove every file and folder?')) return;
            try {
                const data = await request('/api/remove-all', { method: 'DELETE' });
                showStatus(data.message, 'success');
                currentPath = '';
                refresh();
            } catch (error) {
                showStatus(`Error: ${error.message}`, 'error');
            }
        });

        document.getElementById('retryRecent').addEventListener('click', (e) => { e.preventDefault(); loadRecent(); });

        refresh();
    </script>
</body>
</html>
'''
